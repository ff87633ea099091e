"""Shared values for API integration tests."""

from datetime import datetime

# 2024-12-29 00:00 in Asia/Colombo (UTC+05:30)
CALENDAR_START = datetime(2024, 12, 28, 18, 30)

# 2024-12-30 12:30 UTC is 18:00 local, an evening jam
EVENT_PAYLOAD = {
    "title": "Sunset jam",
    "description": "Bring a towel",
    "vibe": "🏖️",
    "location_name": "Weligama beach",
    "location": "https://maps.app.goo.gl/abc123",
    "start_time": "2024-12-30T12:30:00Z",
    "end_time": "2024-12-30T15:00:00Z",
}
