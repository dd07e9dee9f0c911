"""Example: use the service layer without Flask, then the HTTP client against a running API.

Controllers stay thin; the same services back both paths.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from config import load_settings

from hrms_lite.client.api_client import HrmsApiClient
from hrms_lite.client.resilience import ApiError
from hrms_lite.common.logger import configure_logging
from hrms_lite.container import build_container


def main():
    settings = load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", None))
    container = build_container(db_config=settings.DB_CONFIG)
    print(container.stats_service.dashboard().to_dict())

    client = HrmsApiClient(f"http://localhost:{getattr(settings, 'PORT', 5001)}/api", retry_delays=(1.0,))
    try:
        print(client.get_attendance_stats().data)
    except ApiError as e:
        print(f"API call failed: {e}")


if __name__ == "__main__":
    main()
