from concurrent.futures import ThreadPoolExecutor

import pytest

from loadmatch.errors import InvalidLocationInput, LocationUnresolved, LookupUnavailable
from loadmatch.models.domain import Coordinate, LocationDescriptor, PostalLookupKey, PostalLookupResult, Precision
from loadmatch.services.geocoding import CoordinateCache, Geocoder, ResolutionStrategy
from loadmatch.services.geocoding.state_centers import STATE_CENTERS


class CountingLookup:
    """Stub lookup that records every postal code it is asked for."""

    def __init__(self, results=None):
        self.results = results or {}
        self.calls: list[str] = []

    def lookup(self, key):
        self.calls.append(key.value)
        result = self.results.get(key.value)
        if isinstance(result, Exception):
            raise result
        return result


PHOENIX_RESULT = PostalLookupResult(latitude=33.4484, longitude=-112.0740, city="Phoenix", state="AZ")


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("85001", "85001"),
        ("  85001 ", "85001"),
        ("85001-1234", "85001"),
        ("850011234", "85001"),
        ("8500", None),
        ("85a01", None),
        ("", None),
        (None, None),
    ],
)
def test_postal_lookup_key_normalization(raw, expected):
    key = PostalLookupKey.parse(raw)
    if expected is None:
        assert key is None
    else:
        assert key == PostalLookupKey(expected)


def test_cache_get_put_overwrites():
    cache = CoordinateCache()
    key = PostalLookupKey("85001")
    assert cache.get(key) is None

    first = Coordinate(33.0, -112.0)
    second = Coordinate(33.5, -112.5)
    cache.put(key, first)
    cache.put(key, second)

    assert cache.get(key) is second
    assert key in cache
    assert len(cache) == 1


def test_geocode_postal_code_is_cached():
    lookup = CountingLookup({"85001": PHOENIX_RESULT})
    geocoder = Geocoder(lookup)

    first = geocoder.geocode(LocationDescriptor(postal_code="85001"))
    second = geocoder.geocode(LocationDescriptor(postal_code=" 85001-0001"))

    assert lookup.calls == ["85001"]
    assert first is second
    assert first.precision is Precision.POSTAL_CODE
    assert first.resolved_city == "Phoenix"
    assert first.resolved_state == "AZ"
    assert (first.latitude, first.longitude) == (33.4484, -112.0740)


def test_geocoders_do_not_share_caches():
    lookup = CountingLookup({"85001": PHOENIX_RESULT})
    Geocoder(lookup).geocode_parts(postal_code="85001")
    Geocoder(lookup).geocode_parts(postal_code="85001")

    assert lookup.calls == ["85001", "85001"]


def test_geocode_not_found_without_state_is_unresolved():
    lookup = CountingLookup()
    geocoder = Geocoder(lookup)

    with pytest.raises(LocationUnresolved) as excinfo:
        geocoder.geocode(LocationDescriptor(postal_code="00000"))
    assert not isinstance(excinfo.value, InvalidLocationInput)

    # negative results are not cached
    with pytest.raises(LocationUnresolved):
        geocoder.geocode(LocationDescriptor(postal_code="00000"))
    assert lookup.calls == ["00000", "00000"]
    assert len(geocoder.cache) == 0


def test_geocode_not_found_falls_back_to_state_center():
    geocoder = Geocoder(CountingLookup())

    coordinate = geocoder.geocode(LocationDescriptor(postal_code="00000", city="Sedona", state=" az "))

    assert coordinate.precision is Precision.STATE_CENTER
    assert (coordinate.latitude, coordinate.longitude) == STATE_CENTERS["AZ"]
    assert coordinate.resolved_city == "Sedona"
    assert coordinate.resolved_state == "AZ"


def test_geocode_malformed_postal_code_uses_state_without_lookup():
    lookup = CountingLookup()
    coordinate = Geocoder(lookup).geocode_parts(postal_code="ABCDE", state="TX")

    assert lookup.calls == []
    assert coordinate.precision is Precision.STATE_CENTER


def test_geocode_malformed_postal_code_without_state_is_invalid_input():
    lookup = CountingLookup()
    with pytest.raises(InvalidLocationInput):
        Geocoder(lookup).geocode_parts(postal_code="12-34")
    assert lookup.calls == []


@pytest.mark.parametrize(
    "descriptor",
    [
        LocationDescriptor(),
        LocationDescriptor(city="Springfield"),
        LocationDescriptor(city="Toronto", state="ON"),
    ],
)
def test_geocode_without_usable_inputs_is_unresolved(descriptor):
    with pytest.raises(LocationUnresolved):
        Geocoder(CountingLookup()).geocode(descriptor)


def test_geocode_lookup_unavailable_propagates_without_fallback():
    lookup = CountingLookup({"85001": LookupUnavailable("HTTP 503")})
    geocoder = Geocoder(lookup)

    with pytest.raises(LookupUnavailable):
        geocoder.geocode_parts(postal_code="85001", state="AZ")
    assert lookup.calls == ["85001"]
    assert len(geocoder.cache) == 0


def test_geocode_with_custom_strategy_chain():
    class FixedStrategy(ResolutionStrategy):
        name = "fixed"

        def __init__(self, coordinate):
            self.coordinate = coordinate
            self.calls = 0

        def resolve(self, descriptor):
            self.calls += 1
            return self.coordinate

    class DecliningStrategy(ResolutionStrategy):
        name = "declining"

        def resolve(self, descriptor):
            return None

    fixed = FixedStrategy(Coordinate(40.0, -100.0))
    never_reached = FixedStrategy(Coordinate(10.0, 10.0))
    geocoder = Geocoder(CountingLookup(), strategies=[DecliningStrategy(), fixed, never_reached])

    assert geocoder.geocode(LocationDescriptor(city="Anywhere")) == Coordinate(40.0, -100.0)
    assert fixed.calls == 1
    assert never_reached.calls == 0


def test_state_fallback_logs_strategy_name(caplog: pytest.LogCaptureFixture):
    with caplog.at_level("INFO", logger="loadmatch.services.geocoding.strategies"):
        Geocoder(CountingLookup()).geocode_parts(city="Sedona", state="AZ")
    assert "Sedona, AZ via state_center fallback" in caplog.text


def test_geocoder_shared_across_threads():
    results = {
        "85001": PHOENIX_RESULT,
        "85701": PostalLookupResult(latitude=32.2226, longitude=-110.9747, city="Tucson", state="AZ"),
        "90012": PostalLookupResult(latitude=34.0522, longitude=-118.2437, city="Los Angeles", state="CA"),
        "86001": PostalLookupResult(latitude=35.1983, longitude=-111.6513, city="Flagstaff", state="AZ"),
    }
    lookup = CountingLookup(results)
    geocoder = Geocoder(lookup)
    keys = list(results) * 50

    with ThreadPoolExecutor(max_workers=8) as pool:
        resolved = list(pool.map(lambda key: (key, geocoder.geocode_parts(postal_code=key)), keys))

    assert len(resolved) == len(keys)
    for key, coordinate in resolved:
        expected = results[key]
        assert coordinate.precision is Precision.POSTAL_CODE
        assert (coordinate.latitude, coordinate.longitude) == (expected.latitude, expected.longitude)
        assert coordinate.resolved_city == expected.city
    assert len(geocoder.cache) == len(results)
    assert set(lookup.calls) == set(results)
    for key in results:
        assert PostalLookupKey(key) in geocoder.cache
