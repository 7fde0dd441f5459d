# file: post_sample_data.py

import os
import requests
from dotenv import load_dotenv
import json
from datetime import datetime, timedelta, timezone
import random

load_dotenv()

# Endpoint of a running backend
API_URL = os.getenv("API_URL", "http://localhost:8000")
headers = {"Content-Type" : "application/json"}

station = {"station_id" : "iot_station_1", "name" : "IoT station 1", "city" : "Warsaw", "latitude" : 52.2297,
           "longitude" : 21.0122}

def post_measurements(count = 5) :
    """Register the sample station and post `count` hourly measurements going back in time."""
    # Random starting values in realistic ranges
    prev_pm25 = random.uniform(5.0, 50.0)  # PM2.5: typically 5-50 µg/m³
    prev_pm10 = random.uniform(10.0, 100.0)  # PM10: typically 10-100 µg/m³
    prev_no2 = random.uniform(1.0, 40.0)  # NO2: typically 1-40 µg/m³

    try :
        response = requests.post(f"{API_URL}/api/stations", headers = headers, data = json.dumps(station))
    except requests.exceptions.RequestException as e :
        print(f"Station registration failed: {e}")
        return
    if response.status_code not in (201, 400) :
        print(f"Station registration failed: {response.status_code} - {response.text}")
        return

    base_time = datetime.now(timezone.utc).replace(minute = 0, second = 0, microsecond = 0)
    for i in range(count) :
        timestamp = (base_time - timedelta(hours = i)).isoformat()

        # Random walk of +/- 1.0, never below 0
        prev_pm25 = max(0.0, prev_pm25 + random.uniform(-1.0, 1.0))
        prev_pm10 = max(0.0, prev_pm10 + random.uniform(-1.0, 1.0))
        prev_no2 = max(0.0, prev_no2 + random.uniform(-1.0, 1.0))

        data = {
            "station_id" : station["station_id"],
            "measurement_time" : timestamp,
            "pollutants" : [
                {"pollutant" : "PM2.5", "value" : round(prev_pm25, 2), "unit" : "µg/m³"},
                {"pollutant" : "PM10", "value" : round(prev_pm10, 2), "unit" : "µg/m³"},
                {"pollutant" : "NO2", "value" : round(prev_no2, 2), "unit" : "µg/m³"},
            ],
            "metadata" : {"source" : "sample-script"},
        }

        try :
            response = requests.post(f"{API_URL}/api/airquality", headers = headers, data = json.dumps(data))
            if response.status_code == 201 :
                body = response.json()
                print(f"Record {i + 1} saved: {data['measurement_time']}")
                for exceedance in body.get("exceedances", []) :
                    print(f"  {exceedance['pollutant']} {exceedance['severity']} ({exceedance['ratio']}x)")
            else :
                print(f"Error for record {i + 1}: {response.status_code} - {response.text}")
        except requests.exceptions.RequestException as e :
            print(f"Request failed for record {i + 1}: {e}")


if __name__ == "__main__" :
    post_measurements()
