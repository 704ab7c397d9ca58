"""
Employee list normalisation and requester lookup.
"""
from typing import Any, Dict, List, Optional

from supply_orders import config
from supply_orders.models import Employee
from supply_orders.utils.header_lookup import get_value


def normalize_employees(records: List[Dict[str, Any]]) -> List[Employee]:
    """Map EmpList records to Employees; rows without a code are dropped."""
    aliases = config.EMPLOYEE_FIELD_ALIASES
    employees = []
    for record in records:
        code = str(get_value(record, aliases['code']) or '').strip()
        if not code:
            continue
        employees.append(Employee(
            code=code,
            name=str(get_value(record, aliases['name']) or ''),
            factory=str(get_value(record, aliases['factory']) or ''),
            code_name=str(get_value(record, aliases['code_name']) or ''),
        ))
    return employees


def find_employee(employees: List[Employee], code: Any) -> Optional[Employee]:
    """
    Resolve a typed employee code.

    Returns None until the code is at least EMPLOYEE_CODE_MIN_LENGTH
    characters long, so partial input never resolves to someone else.
    """
    code = str(code or '').strip()
    if len(code) < config.EMPLOYEE_CODE_MIN_LENGTH:
        return None
    for employee in employees:
        if employee.code == code:
            return employee
    return None
