from flightfinder.parse.relevance import is_flight_request


def test_code_direct(airports):
    assert airports.resolve("GRU") == ["GRU"]
    assert airports.resolve("gru") == ["GRU"]


def test_city_exact_london(airports):
    codes = airports.resolve("London")
    assert codes[0] == "LHR"
    assert set(codes) == {"LHR", "LGW", "LCY"}


def test_city_alias_nyc(airports):
    assert airports.resolve("NYC") == ["JFK", "LGA"]


def test_country_exact_japan(airports):
    codes = airports.resolve("Japan")
    assert any(c in codes for c in ("HND", "NRT"))


def test_country_alias_holland(airports):
    assert airports.resolve("Holland") == ["AMS"]


def test_accented_alias(airports):
    assert airports.resolve("São Paulo") == ["GRU"]


def test_unknown_and_empty(airports):
    assert airports.resolve("Atlantis") == []
    assert airports.resolve("  ") == []
    assert airports.resolve(None) == []


def test_lookup_by_code(airports):
    info = airports.lookup(" lax ")
    assert info.city == "Los Angeles"
    assert info.country == "United States"
    assert airports.lookup("XXX") is None
    assert airports.lookup(None) is None


class TestRelevance:
    def test_keywords_and_phrases(self):
        assert is_flight_request("Can you find me a flight to Rome?")
        assert is_flight_request("I need a plane ticket")
        assert is_flight_request("planning a getaway next month")

    def test_from_to_with_iata_code(self, airports):
        assert is_flight_request("from LHR to MAD next Tuesday", codes=airports.codes)
        assert not is_flight_request("from LHR to MAD next Tuesday")

    def test_capitalised_words_are_not_airports(self, airports):
        places, codes = airports.place_names(), airports.codes
        assert not is_flight_request("send it to the USA office", places, codes)
        assert not is_flight_request("forward this to the CEO", places, codes)

    def test_from_to_with_known_city(self, airports):
        assert is_flight_request("going from london to paris", airports.place_names())
        assert not is_flight_request("going from london to paris")

    def test_unrelated_text(self, airports):
        assert not is_flight_request("what's the weather like?", airports.place_names())
        assert not is_flight_request("send this to my mom", airports.place_names())
        assert not is_flight_request("")
        assert not is_flight_request(None)
