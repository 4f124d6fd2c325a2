import asyncio
import json
import sys
from datetime import date, timedelta
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lodge_rates.booking.rates_client import RatesGatewayClient
from lodge_rates.booking.service import RatesService
from lodge_rates.booking.validation import parse_booking_request
from lodge_rates.core.config import get_settings
from lodge_rates.core.logging import setup_logging


async def main() -> None:
    setup_logging()
    arrival = date.today() + timedelta(days=7)
    departure = arrival + timedelta(days=2)
    body = {
        "Unit Name": sys.argv[1] if len(sys.argv) > 1 else "Standard Room",
        "Arrival": arrival.strftime("%d/%m/%Y"),
        "Departure": departure.strftime("%d/%m/%Y"),
        "Occupants": 2,
        "Ages": [30, 10],
    }

    settings = get_settings()
    gateway = RatesGatewayClient(settings)
    service = RatesService.from_settings(gateway, settings)
    try:
        rates = await service.fetch_rates(parse_booking_request(body), original=body)
    finally:
        await gateway.close()

    print("Request:", json.dumps(body))
    print(json.dumps(rates, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    asyncio.run(main())
