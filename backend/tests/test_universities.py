"""
Tests for university search, suggestion and detail endpoints.
"""
from datetime import datetime
from unittest.mock import MagicMock

import pytest
from bson import ObjectId

from uniportal.config.constants import MAX_PAGE
from uniportal.models.university import University


@pytest.fixture
def seeded(collection, make_university):
    """A small mixed dataset."""
    collection.insert_many([
        make_university(
            "Massachusetts Institute of Technology", short_name="MIT", iau_id="IAU-000001",
            country="United States", city="Cambridge", type="Private", status="Active",
            established=1861,
        ),
        make_university(
            "University of Cambridge", short_name="Cam", iau_id="IAU-000002",
            country="United Kingdom", city="Cambridge", type="Public", status="Active",
            established=1209,
        ),
        make_university(
            "University of Tokyo", short_name="UTokyo", iau_id="IAU-000003",
            country="Japan", city="Tokyo", type="Public", status="Active", established=1877,
        ),
        make_university(
            "Tokyo Institute of Technology", short_name="Tokyo Tech", iau_id="IAU-000004",
            country="Japan", city="Tokyo", type="Public", status="Merged", established=1881,
        ),
        make_university(
            "Kyoto University", iau_id="IAU-000005",
            country="Japan", city="Kyoto", type="Public", status="Active", established=1897,
        ),
    ])
    return collection


def names(response):
    return [row["institution"]["name"] for row in response.json()["data"]]


class TestSearch:
    """Tests for /universities/search."""

    def test_search_all(self, client, base_url, seeded):
        response = client.get(f"{base_url}/universities/search")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["count"] == 5
        assert body["pagination"] == {
            "page": 1,
            "limit": 20,
            "total": 5,
            "totalPages": 1,
            "hasNext": False,
            "hasPrev": False,
        }
        assert body["query"] == {}
        assert names(response) == sorted(names(response))

    def test_summary_records_expose_id(self, client, base_url, seeded):
        row = client.get(f"{base_url}/universities/search?city=Kyoto").json()["data"][0]
        assert len(row["id"]) == 24
        assert "_id" not in row
        assert row["general_information"]["address"]["city"] == "Kyoto"

    def test_japan_second_page(self, client, base_url, collection, make_university):
        """25 Japanese records, page 2 of 10 returns records 11-20 by name."""
        collection.insert_many(
            [make_university(f"University {i:02d}", country="Japan") for i in range(1, 26)]
            + [make_university("Other University", country="Peru")]
        )
        response = client.get(
            f"{base_url}/universities/search?search=&country=Japan&page=2&limit=10"
            "&sortBy=name&sortOrder=asc"
        )
        assert response.status_code == 200
        body = response.json()
        assert names(response) == [f"University {i:02d}" for i in range(11, 21)]
        assert body["count"] == 10
        assert body["pagination"]["total"] == 25
        assert body["pagination"]["totalPages"] == 3
        assert body["pagination"]["hasNext"] is True
        assert body["pagination"]["hasPrev"] is True
        assert body["query"] == {"country": "Japan"}

    def test_country_and_city_combine(self, client, base_url, seeded):
        response = client.get(f"{base_url}/universities/search?country=japan&city=TOKYO")
        assert sorted(names(response)) == ["Tokyo Institute of Technology", "University of Tokyo"]

    def test_name_matches_short_name(self, client, base_url, seeded):
        response = client.get(f"{base_url}/universities/search?name=mit")
        assert names(response) == ["Massachusetts Institute of Technology"]

    def test_name_matches_either_field(self, client, base_url, seeded):
        response = client.get(f"{base_url}/universities/search?name=tokyo")
        assert sorted(names(response)) == ["Tokyo Institute of Technology", "University of Tokyo"]

    def test_type_and_status(self, client, base_url, seeded):
        response = client.get(f"{base_url}/universities/search?type=public&status=merged")
        assert names(response) == ["Tokyo Institute of Technology"]

    def test_regex_characters_match_literally(self, client, base_url, seeded):
        response = client.get(f"{base_url}/universities/search", params={"name": ".*"})
        assert response.status_code == 200
        assert response.json()["count"] == 0

    def test_sort_established_desc(self, client, base_url, seeded):
        response = client.get(f"{base_url}/universities/search?sortBy=established&sortOrder=desc")
        assert names(response)[0] == "Kyoto University"
        assert names(response)[-1] == "University of Cambridge"

    def test_sort_order_case_insensitive(self, client, base_url, seeded):
        response = client.get(f"{base_url}/universities/search?sortBy=name&sortOrder=DESC")
        assert response.status_code == 200
        assert names(response)[0] == "University of Tokyo"

    def test_page_beyond_total(self, client, base_url, seeded):
        response = client.get(f"{base_url}/universities/search?page=9&limit=2")
        assert response.status_code == 200
        body = response.json()
        assert body["data"] == []
        assert body["pagination"]["totalPages"] == 3
        assert body["pagination"]["hasNext"] is False
        assert body["pagination"]["hasPrev"] is True

    def test_search_uses_text_query(self, client, base_url, override_collection):
        """search becomes a $text query and suppresses name."""
        store = override_collection(MagicMock())
        store.count_documents.return_value = 0
        store.find.return_value.sort.return_value.skip.return_value.limit.return_value = []

        response = client.get(f"{base_url}/universities/search?search=technology&name=Tech&country=Japan")
        assert response.status_code == 200
        query = store.find.call_args[0][0]
        assert query == {
            "$text": {"$search": "technology"},
            "institution.country_line": {"$regex": "Japan", "$options": "i"},
        }
        assert response.json()["query"] == {"search": "technology", "name": "Tech", "country": "Japan"}

    def test_query_echo_is_cleaned(self, client, base_url, seeded):
        response = client.get(
            f"{base_url}/universities/search",
            params={"search": "   ", "name": "", "country": "  Japan ", "city": "Tokyo"},
        )
        assert response.status_code == 200
        assert response.json()["query"] == {"country": "Japan", "city": "Tokyo"}


class TestSearchValidation:
    """Invalid parameters are rejected with 400 before reaching the store."""

    @pytest.mark.parametrize("params, message", [
        ({"page": "0"}, "Invalid page number"),
        ({"page": "abc"}, "Invalid page number"),
        ({"page": str(10**20)}, "Invalid page number"),
        ({"limit": "0"}, "Invalid limit (must be between 1 and 100)"),
        ({"limit": "101"}, "Invalid limit (must be between 1 and 100)"),
        (
            {"sortBy": "rank"},
            "Invalid sort field. Valid options: name, country, city, type, updated, established",
        ),
        ({"sortOrder": "up"}, "Invalid sort order (must be asc or desc)"),
        ({"search": "x" * 101}, "Search query too long (max 100 characters)"),
        ({"name": "x" * 101}, "Name query too long (max 100 characters)"),
        ({"country": "x" * 51}, "Country query too long (max 50 characters)"),
        ({"city": "x" * 51}, "City query too long (max 50 characters)"),
    ])
    def test_rejected(self, client, base_url, override_collection, params, message):
        store = override_collection(MagicMock())
        response = client.get(f"{base_url}/universities/search", params=params)
        assert response.status_code == 400
        assert response.json() == {"status": "error", "message": message}
        assert store.method_calls == []

    def test_boundary_lengths_accepted(self, client, base_url, seeded):
        response = client.get(
            f"{base_url}/universities/search",
            params={"name": "x" * 100, "country": "x" * 50, "limit": "100"},
        )
        assert response.status_code == 200

    def test_largest_page_accepted(self, client, base_url, override_collection):
        store = override_collection(MagicMock())
        store.count_documents.return_value = 0
        store.find.return_value.sort.return_value.skip.return_value.limit.return_value = []

        response = client.get(
            f"{base_url}/universities/search", params={"page": str(MAX_PAGE), "limit": "100"}
        )
        assert response.status_code == 200
        skip = store.find.return_value.sort.return_value.skip.call_args[0][0]
        assert skip == (MAX_PAGE - 1) * 100
        assert skip <= 2**63 - 1


class TestSuggest:
    """Tests for /universities/suggest."""

    def test_short_query_skips_store(self, client, base_url, override_collection):
        store = override_collection(MagicMock())
        response = client.get(f"{base_url}/universities/suggest?q=M")
        assert response.status_code == 200
        assert response.json() == {"status": "success", "data": [], "count": 0}
        assert store.method_calls == []

    def test_missing_query(self, client, base_url, seeded):
        response = client.get(f"{base_url}/universities/suggest")
        assert response.json()["data"] == []

    def test_matches_short_name(self, client, base_url, seeded):
        response = client.get(f"{base_url}/universities/suggest?q=mit")
        assert response.status_code == 200
        assert names(response) == ["Massachusetts Institute of Technology"]

    def test_minimal_fields(self, client, base_url, seeded):
        row = client.get(f"{base_url}/universities/suggest?q=Kyoto").json()["data"][0]
        assert set(row) <= {"id", "institution", "general_information"}
        assert set(row["institution"]) <= {"name", "short_name", "iau_id", "country_line"}
        assert row["general_information"] == {"address": {"city": "Kyoto"}}

    def test_limit_is_clamped(self, client, base_url, collection, make_university):
        collection.insert_many([make_university(f"Tech {i}") for i in range(30)])
        response = client.get(f"{base_url}/universities/suggest?q=tech&limit=50")
        assert response.json()["count"] == 20
        response = client.get(f"{base_url}/universities/suggest?q=tech&limit=3")
        assert response.json()["count"] == 3

    def test_non_integer_limit(self, client, base_url, seeded):
        response = client.get(f"{base_url}/universities/suggest?q=tech&limit=many")
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid limit (must be an integer)"


class TestDetail:
    """Tests for /universities/{id}."""

    def test_by_native_id(self, client, base_url, collection, make_university):
        doc = make_university(
            "University of Lagos", iau_id="IAU-000777", country="Nigeria",
            officers=[{"name": "A. Person", "role": "Vice-Chancellor"}],
        )
        oid = collection.insert_one(doc).inserted_id
        response = client.get(f"{base_url}/universities/{oid}")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == str(oid)
        assert data["institution"]["name"] == "University of Lagos"
        assert data["officers"][0]["role"] == "Vice-Chancellor"

    def test_by_iau_id(self, client, base_url, seeded):
        response = client.get(f"{base_url}/universities/IAU-000003")
        assert response.status_code == 200
        assert response.json()["data"]["institution"]["name"] == "University of Tokyo"

    def test_unknown_iau_id(self, client, base_url, seeded):
        response = client.get(f"{base_url}/universities/IAU-999999")
        assert response.status_code == 404
        assert response.json() == {"status": "error", "message": "University not found"}

    def test_unknown_native_id(self, client, base_url, seeded):
        response = client.get(f"{base_url}/universities/{ObjectId()}")
        assert response.status_code == 404

    def test_unknown_fields_preserved(self, client, base_url, collection, make_university):
        collection.insert_one(make_university("Extra U", iau_id="IAU-X", rankings={"qs": 12}))
        data = client.get(f"{base_url}/universities/IAU-X").json()["data"]
        assert data["rankings"] == {"qs": 12}


class TestSuggestValidation:
    def test_query_too_long(self, client, base_url, seeded):
        response = client.get(f"{base_url}/universities/suggest", params={"q": "x" * 101})
        assert response.status_code == 400
        assert response.json()["message"] == "Suggestion query too long (max 100 characters)"


@pytest.fixture
def irregular(collection, make_university):
    """Records whose nested values do not follow the usual shapes."""
    doc = make_university(
        "Lingua University", short_name="LU", iau_id="IAU-000900", country="Peru",
        city="Lima", established="c. 1900", updated_on=datetime(2024, 5, 1),
        officers=["Dr. X"],
        divisions="Faculty of Arts",
        degrees={"programs": "BA"},
        student_staff_numbers={"total_students": "about 2,000", "staff": 40},
    )
    doc["general_information"]["languages"] = "English"
    collection.insert_one(doc)
    collection.insert_one({
        "institution": {"name": "Unnamed College", "short_name": 7},
        "general_information": {"type": ["Public", "Private"]},
    })
    return collection


class TestIrregularRecords:
    """Stored values are passed through when their shape is unexpected."""

    def test_detail(self, client, base_url, irregular):
        response = client.get(f"{base_url}/universities/IAU-000900")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["officers"] == ["Dr. X"]
        assert data["divisions"] == "Faculty of Arts"
        assert data["degrees"] == {"programs": "BA"}
        assert data["general_information"]["languages"] == "English"
        assert data["general_information"]["established"] == "c. 1900"
        assert data["student_staff_numbers"] == {"total_students": "about 2,000", "staff": 40}

    def test_search(self, client, base_url, irregular):
        response = client.get(f"{base_url}/universities/search")
        assert response.status_code == 200
        rows = {row["institution"]["name"]: row for row in response.json()["data"]}
        assert sorted(rows) == ["Lingua University", "Unnamed College"]
        assert rows["Unnamed College"]["institution"]["short_name"] == 7
        assert rows["Unnamed College"]["general_information"]["type"] == ["Public", "Private"]
        assert rows["Lingua University"]["general_information"]["established"] == "c. 1900"

    def test_suggest(self, client, base_url, irregular):
        response = client.get(f"{base_url}/universities/suggest?q=lingua")
        assert response.status_code == 200
        assert names(response) == ["Lingua University"]

    def test_strings_are_not_coerced(self):
        record = University.model_validate({
            "_id": 12,
            "institution": {"name": 7, "updated_on": "2024"},
            "general_information": {"established": "1861", "address": "Main St"},
        })
        dumped = record.model_dump(exclude_none=True)
        assert dumped["id"] == 12
        assert dumped["institution"] == {"name": 7, "updated_on": "2024"}
        assert dumped["general_information"] == {"established": "1861", "address": "Main St"}
