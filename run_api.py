#!/usr/bin/env python3
"""
Supply Order API - Main Launcher
Validates configuration and serves the FastAPI app with uvicorn
"""
import sys
import os
from pathlib import Path

# Get project root directory
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT / 'src'))


def main():
    """Main entry point"""
    try:
        import uvicorn
        from supply_orders import config
        from supply_orders.config import validate_config
        from supply_orders.utils.logger import get_logger
        from supply_orders.api.main import create_app

        print("\n" + "="*80)
        print("SUPPLY ORDER API")
        print("="*80)
        print(f"Project Root: {PROJECT_ROOT}")
        print(f"Environment: {config.RUNTIME_ENVIRONMENT}")
        print("="*80 + "\n")

        validate_config()
        print("[OK] Configuration validated")

        logger = get_logger(log_level=config.LOG_LEVEL)
        logger.info(
            f"REST API starting on http://{config.API_HOST}:{config.API_PORT} (Swagger: /docs)",
            component="Main",
        )
        if os.getenv('K_SERVICE'):
            logger.info(f"Cloud Run detected: serving on PORT {config.API_PORT}", component="Main")

        uvicorn.run(create_app(), host=config.API_HOST, port=config.API_PORT, log_level="info")

    except Exception as e:
        print(f"\n[FAIL] Failed to start API: {str(e)}")
        if 'logger' in locals():
            logger.critical(f"API startup failed: {str(e)}", component="Main", exc_info=True)
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nAPI stopped by user")
        sys.exit(0)
