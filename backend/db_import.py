# file: backend/db_import.py
import json
import logging

from pydantic import ValidationError as SchemaValidationError
from tqdm import tqdm

from backend.database import close_db, connect_db, find_station, insert_measurement
from backend.errors import ValidationError
from backend.models import MeasurementCreate
from backend.utils import get_current_time


def import_from_json(input_file: str = "air_quality_export.json") -> int:
    """Import measurements from a JSON export, skipping invalid records and records of unregistered stations."""
    # Read JSON file
    with open(input_file, "r", encoding = "utf-8") as f :
        data = json.load(f)

    logging.info(f"Loaded {len(data)} records from {input_file}")

    import_time = get_current_time()
    imported = 0
    for index, entry in enumerate(tqdm(data, desc = "Importing measurements")) :
        try :
            measurement = MeasurementCreate.model_validate(entry)
            if find_station(measurement.station_id) is None :
                logging.warning(f"Skipping record {index}: station {measurement.station_id} is not registered")
                continue
            record = measurement.model_dump()
            record["metadata"]["import_time"] = import_time
            insert_measurement(record)
            imported += 1
        except (SchemaValidationError, ValidationError) as e :
            logging.warning(f"Skipping record {index}: {e}")

    logging.info(f"Imported {imported} of {len(data)} measurements")
    return imported

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    connect_db()
    try :
        import_from_json()
    finally :
        close_db()
