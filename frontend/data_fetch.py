#file: frontend/data_fetch.py

import os
import aiohttp
import logging
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from frontend.form_state import Submission

load_dotenv()

API_URL = os.getenv("API_URL", "http://localhost:8000")
MEASUREMENTS_URL = f"{API_URL}/api/airquality"
STATIONS_URL = f"{API_URL}/api/stations"


class ApiError(Exception):
    """Request failed; the message is the server's error text when it sent one."""


async def _request(method: str, url: str, **kwargs) -> Dict[str, Any]:
    async with aiohttp.ClientSession() as session:
        try:
            async with session.request(method, url, **kwargs) as response:
                try:
                    body = await response.json(content_type=None)
                except ValueError:
                    body = None
                if response.status >= 400 or not isinstance(body, dict) or not body.get("success"):
                    message = body.get("error") if isinstance(body, dict) and body.get("error") else f"HTTP {response.status}"
                    logging.error(f"[ERROR] {method} {url}: {message}")
                    raise ApiError(message)
                return body
        except aiohttp.ClientError as e:
            logging.error(f"[ERROR] Network request failed: {e}")
            raise ApiError(str(e)) from e


async def fetch_latest() -> List[Dict[str, Any]]:
    """Fetch the latest measurement of every station."""
    body = await _request("GET", f"{MEASUREMENTS_URL}/latest")
    data = body.get("data")
    if not isinstance(data, list):
        raise ApiError("Invalid response format")
    return data


async def fetch_measurements(station_id=None, pollutant=None, start_date=None, end_date=None, page=1, limit=100):
    """Fetch one page of measurements with filters; returns (records, pagination)."""
    params = {
        key: str(value)
        for key, value in {
            "station_id": station_id,
            "pollutant": pollutant,
            "start_date": start_date,
            "end_date": end_date,
            "page": page,
            "limit": limit,
        }.items()
        if value is not None
    }
    body = await _request("GET", MEASUREMENTS_URL, params=params)
    return body["data"], body["pagination"]


async def fetch_statistics(station_id, pollutant, start_date, end_date) -> Optional[Dict[str, Any]]:
    params = {
        "station_id": station_id,
        "pollutant": pollutant,
        "start_date": str(start_date),
        "end_date": str(end_date),
    }
    body = await _request("GET", f"{MEASUREMENTS_URL}/statistics", params=params)
    return body.get("data")


async def fetch_stations() -> List[Dict[str, Any]]:
    body = await _request("GET", STATIONS_URL)
    return body["data"]


async def send_submission(submission: Submission) -> Dict[str, Any]:
    """Send a create (POST) or update (PUT) built from the form; returns the envelope."""
    if submission.method == "PUT":
        return await _request("PUT", f"{MEASUREMENTS_URL}/{submission.measurement_id}", json=submission.payload)
    return await _request("POST", MEASUREMENTS_URL, json=submission.payload)


async def delete_measurement(measurement_id: str) -> Dict[str, Any]:
    body = await _request("DELETE", f"{MEASUREMENTS_URL}/{measurement_id}")
    return body["data"]
