"""
Google Sheets connection shared by the ledger and catalog wrappers.
"""
import gspread
from oauth2client.service_account import ServiceAccountCredentials

from supply_orders import config

SCOPE = [
    "https://spreadsheets.google.com/feeds",
    "https://www.googleapis.com/auth/drive",
]


def get_client():
    """Create a gspread client from a service account file or ADC."""
    creds_path = config.get_credentials_path()
    if creds_path:
        creds = ServiceAccountCredentials.from_json_keyfile_name(creds_path, SCOPE)
        return gspread.authorize(creds)

    import google.auth

    credentials, _ = google.auth.default(scopes=SCOPE)
    return gspread.authorize(credentials)


def open_spreadsheet(sheet_id: str = None):
    """Open the order workbook (GOOGLE_SHEET_ID unless overridden)."""
    target_sheet_id = sheet_id or config.GOOGLE_SHEET_ID
    if not target_sheet_id:
        raise ValueError("GOOGLE_SHEET_ID must be set")
    try:
        return get_client().open_by_key(target_sheet_id)
    except Exception as e:
        raise Exception(f"Failed to open Google Sheet: {str(e)}")


class WorkbookTabs:
    """
    Worksheet access with lazy tab creation.

    For tests, pass a fake spreadsheet object exposing ``worksheet``,
    ``add_worksheet`` and per-worksheet ``get_all_values`` / ``append_row`` /
    ``update_cell``; no real API calls are made.
    """

    def __init__(self, spreadsheet=None):
        self.spreadsheet = spreadsheet if spreadsheet is not None else open_spreadsheet()
        self._ws_cache = {}

    @classmethod
    def from_spreadsheet(cls, spreadsheet):
        return cls(spreadsheet=spreadsheet)

    def get_or_create_sheet(self, title, columns):
        if title in self._ws_cache:
            return self._ws_cache[title]

        try:
            ws = self.spreadsheet.worksheet(title)
        except gspread.exceptions.WorksheetNotFound:
            ws = self.spreadsheet.add_worksheet(title=title, rows=1000, cols=len(columns))
            ws.append_row(columns, value_input_option="USER_ENTERED")
            self._ws_cache[title] = ws
            return ws

        if not ws.row_values(1):
            ws.append_row(columns, value_input_option="USER_ENTERED")

        self._ws_cache[title] = ws
        return ws
