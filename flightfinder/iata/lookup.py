from typing import Dict, List, Optional, Set
import csv

from flightfinder.types import AirportInfo


class AirportDb:
    """Airport reference table loaded from CSV (iata_code,name,city,country).

    Provides O(1) lookups by IATA code and resolution of city/country names to
    codes for display and for models that answer with a city instead of a code.
    """

    def __init__(self, csv_path: str):
        self.by_code: Dict[str, AirportInfo] = {}
        self.by_city: Dict[str, List[str]] = {}
        self.by_country: Dict[str, List[str]] = {}
        self.city_aliases: Dict[str, str] = {
            "ny": "new york",
            "nyc": "new york",
            "new york city": "new york",
            "la": "los angeles",
            "vegas": "las vegas",
            "dc": "washington",
            "washington dc": "washington",
            "heathrow": "london",
            "gatwick": "london",
            "são paulo": "sao paulo",
            "rio": "rio de janeiro",
            "lisboa": "lisbon",
        }
        self.country_aliases: Dict[str, str] = {
            "uk": "united kingdom",
            "england": "united kingdom",
            "usa": "united states",
            "us": "united states",
            "united states of america": "united states",
            "uae": "united arab emirates",
            "holland": "netherlands",
            "the netherlands": "netherlands",
            "brasil": "brazil",
        }
        self._load_from_csv(csv_path)

    def _load_from_csv(self, path: str) -> None:
        with open(path, newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for row in reader:
                code = (row.get("iata_code") or "").strip().upper()
                if len(code) != 3:
                    continue
                info = AirportInfo(
                    code=code,
                    name=(row.get("name") or "").strip(),
                    city=(row.get("city") or "").strip(),
                    country=(row.get("country") or "").strip(),
                )
                self.by_code[code] = info
                if info.city:
                    self.by_city.setdefault(info.city.lower(), []).append(code)
                if info.country:
                    self.by_country.setdefault(info.country.lower(), []).append(code)

    @property
    def codes(self) -> Set[str]:
        return set(self.by_code)

    def lookup(self, code: Optional[str]) -> Optional[AirportInfo]:
        """Airport record for an IATA code, or None if unknown."""
        if not code:
            return None
        return self.by_code.get(code.strip().upper())

    def resolve(self, text: Optional[str]) -> List[str]:
        """Resolve a code, city or country name to IATA codes.

        Resolution order: direct code -> city (alias/exact) -> country (alias/exact).
        """
        if text is None:
            return []
        raw = text.strip()
        if not raw:
            return []
        t = raw.lower()

        if len(raw) == 3 and raw.upper() in self.by_code:
            return [raw.upper()]

        city_key = self.city_aliases.get(t, t)
        if city_key in self.by_city:
            return list(self.by_city[city_key])

        country_key = self.country_aliases.get(t, t)
        if country_key in self.by_country:
            return list(self.by_country[country_key])

        return []

    def place_names(self) -> Set[str]:
        """Lower-cased city names and aliases, for spotting locations in free text."""
        return set(self.by_city) | set(self.city_aliases)
