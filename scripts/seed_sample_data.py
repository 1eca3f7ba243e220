"""
Seed a durable database with sample bricks, tractors, laborers and billing settings.

Usage:
    DATABASE_URL=sqlite:///./var/dev.db python scripts/seed_sample_data.py

Idempotent: existing bricks (by type), tractors (by registration number) and
laborers (by phone) are left alone; settings are upserted.
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

try:
    from brickyard.config import Settings
    from brickyard.schemas.bricks import BrickCreate
    from brickyard.schemas.laborers import LaborerCreate
    from brickyard.schemas.settings import Setting
    from brickyard.schemas.tractors import TractorCreate
    from brickyard.storage.factory import build_store
except ImportError as e:
    print(f"ERROR: Failed to import application components: {e}")
    sys.exit(1)


SAMPLE_BRICKS = [
    {"type": "Red Clay", "description": "Standard fired red clay brick", "current_stock": 50000, "min_stock": 5000, "unit_price": "12.00"},
    {"type": "Fly Ash", "description": "Fly ash cement brick", "current_stock": 20000, "min_stock": 3000, "unit_price": "9.50"},
    {"type": "Tuff Tile", "description": "Interlocking paver tile", "current_stock": 800, "min_stock": 1000, "unit_price": "35.00"},
]

SAMPLE_TRACTORS = [
    {"registration_number": "LHR-1023", "model": "Massey Ferguson 385", "driver_name": "Aslam", "driver_phone": "0300-1234567"},
    {"registration_number": "LHR-2291", "model": "Fiat 640", "driver_name": "Imran", "driver_phone": "0301-7654321"},
    {"registration_number": "LHR-3310", "model": "Belarus 510", "status": "maintenance"},
]

SAMPLE_LABORERS = [
    {"name": "Rashid", "phone": "0302-1111111", "monthly_salary": "32000"},
    {"name": "Bilal", "phone": "0303-2222222", "monthly_salary": "30000"},
    {"name": "Naveed", "phone": "0304-3333333", "monthly_salary": "30000", "status": "on_leave"},
]

SAMPLE_SETTINGS = [
    {"key": "deliveryCharge", "value": "2500"},
    {"key": "laborCharge", "value": "1000"},
    {"key": "taxRate", "value": "0.18"},
]


def seed_sample_data():
    config = Settings(storage_backend="sql")
    store = build_store(config)
    try:
        with store.transaction():
            existing_types = {b.type for b in store.bricks.list()}
            for data in SAMPLE_BRICKS:
                if data["type"] in existing_types:
                    print(f"Brick '{data['type']}' already exists, skipping")
                    continue
                store.bricks.create(BrickCreate(**data))
                print(f"Created brick '{data['type']}'")

            existing_regs = {t.registration_number for t in store.tractors.list()}
            for data in SAMPLE_TRACTORS:
                if data["registration_number"] in existing_regs:
                    print(f"Tractor {data['registration_number']} already exists, skipping")
                    continue
                store.tractors.create(TractorCreate(**data))
                print(f"Created tractor {data['registration_number']}")

            existing_phones = {laborer.phone for laborer in store.laborers.list()}
            for data in SAMPLE_LABORERS:
                if data["phone"] in existing_phones:
                    print(f"Laborer {data['name']} already exists, skipping")
                    continue
                store.laborers.create(LaborerCreate(**data))
                print(f"Created laborer {data['name']}")

            store.settings.update_settings([Setting(**s) for s in SAMPLE_SETTINGS])
            print("Billing settings upserted")
    finally:
        store.close()


if __name__ == "__main__":
    seed_sample_data()
