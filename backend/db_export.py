# file: backend/db_export.py

import json
import logging

from backend.database import all_measurements, close_db, connect_db


def export_to_json(output_file: str = "air_quality_export.json") -> int:
    """Export all measurements to a JSON file, oldest first."""
    try :
        data = []
        for measurement in all_measurements() :
            record = measurement.to_record()
            data.append({
                "station_id" : record["station_id"],
                "measurement_time" : record["measurement_time"].isoformat(),
                "pollutants" : record["pollutants"],
                "metadata" : {
                    **record["metadata"],
                    "import_time" : record["metadata"]["import_time"].isoformat() if record["metadata"]["import_time"] else None,
                },
            })

        # Write to JSON file
        with open(output_file, "w", encoding = "utf-8") as f :
            json.dump(data, f, indent = 2, ensure_ascii = False)
        logging.info(f"Exported {len(data)} records to {output_file}")
        return len(data)
    except Exception as e :
        logging.error(f"Error exporting data: {e}")
        raise

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    connect_db()
    try :
        export_to_json()
    finally :
        close_db()
