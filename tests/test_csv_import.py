import logging

import pytest

from orbita_import.columns import detect_columns, has_name_column, header_key
from orbita_import.importer import import_contacts_from_csv
from orbita_import.mapping import RowMappingSettings, map_row
from orbita_import.models import Location, SocialLink
from orbita_import.rows import parse_csv_rows

GOOGLE_HEADER = ",".join(
    [
        "First Name",
        "Middle Name",
        "Last Name",
        "Nickname",
        "Birthday",
        "Notes",
        "Photo",
        "Labels",
        "E-mail 1 - Value",
        "Phone 1 - Label",
        "Phone 1 - Value",
        "Address 1 - City",
        "Address 1 - Country",
        "Organization Name",
        "Organization Title",
        "Website 1 - Value",
    ]
)


def test_parse_csv_rows_quoted_cells():
    rows = parse_csv_rows('name,bio,city\n"Doe, Jane","She said ""hi""", Berlin \n')
    assert rows == [["name", "bio", "city"], ["Doe, Jane", 'She said "hi"', "Berlin"]]


def test_parse_csv_rows_ignores_blank_lines():
    compact = "name,city\nJane Doe,Berlin\nJohn Roe,Paris"
    spaced = "\r\n\r\nname,city\r\n\r\nJane Doe,Berlin\r\n   \r\n\t\nJohn Roe,Paris\r\n\r\n"
    assert parse_csv_rows(spaced) == parse_csv_rows(compact)
    assert len(parse_csv_rows(spaced)) == 3


def test_parse_csv_rows_keeps_ragged_rows_and_strips_bom():
    rows = parse_csv_rows("\ufeffFirst Name,Last Name\nAda\nGrace,Hopper,extra")
    assert rows[0] == ["First Name", "Last Name"]
    assert rows[1] == ["Ada"]
    assert rows[2] == ["Grace", "Hopper", "extra"]


def test_header_key_tolerates_case_spacing_and_underscores():
    assert header_key("  First_Name ") == "firstname"
    assert header_key("E-mail 1 - Value") == "e-mail1-value"


def test_detect_columns_simple_synonyms():
    columns = detect_columns(
        ["First", "last_name", "Latitude", "lon", "Tag", "langs", "Born", "Insta", "X", "Web"]
    )
    assert columns == {
        "firstName": 0,
        "lastName": 1,
        "lat": 2,
        "lng": 3,
        "roles": 4,
        "languages": 5,
        "birthYear": 6,
        "instagram": 7,
        "twitter": 8,
        "website": 9,
    }


def test_detect_columns_google_export_and_unknown_headers():
    columns = detect_columns(GOOGLE_HEADER.split(",") + ["Custom Field"])
    assert columns["firstName"] == 0
    assert columns["middleName"] == 1
    assert columns["bio"] == 5
    assert columns["labels"] == 7
    assert columns["email"] == 8
    assert columns["phone1"] == 10
    assert columns["address1City"] == 11
    assert columns["organization"] == 13
    assert columns["title"] == 14
    assert columns["website"] == 15
    assert "Custom Field" not in columns
    assert len(columns) == 15  # "Phone 1 - Label" and "Custom Field" are ignored


def test_has_name_column():
    assert has_name_column(detect_columns(["Full Name", "city"]))
    assert has_name_column(detect_columns(["given name"]))
    assert not has_name_column(detect_columns(["Last Name", "city"]))


def test_import_simple_csv_round_trip():
    text = (
        "name,city,country,lat,lng,roles\n"
        '"Jane Doe",Berlin,Germany,52.52,13.405,designer;writer\n'
    )
    result = import_contacts_from_csv(text)
    assert result.success is True
    assert result.errors == []
    assert len(result.contacts) == 1
    jane = result.contacts[0]
    assert jane.first_name == "Jane"
    assert jane.last_name == "Doe"
    assert jane.location == Location(lat=52.52, lng=13.405, city="Berlin", country="Germany")
    assert jane.tags == ["designer", "writer"]
    assert jane.contact_id


def test_import_csv_needs_header_and_data_row():
    result = import_contacts_from_csv("name,city\n\n")
    assert result.success is False
    assert result.contacts == []
    assert result.errors == ["CSV must have a header row and at least one data row"]


def test_import_csv_needs_name_column():
    result = import_contacts_from_csv("city,country\nBerlin,Germany\n")
    assert result.success is False
    assert result.errors == ['CSV must have a "name" or "firstName" column']


def test_import_csv_skips_rows_without_first_name(caplog):
    text = "firstName,lastName,city\n,Nobody,Rome\nAda,Lovelace,London\n,,\n"
    with caplog.at_level(logging.WARNING, logger="orbita_import.mapping"):
        result = import_contacts_from_csv(text)
    assert result.success is True
    assert [c.first_name for c in result.contacts] == ["Ada"]
    # the all-empty ",," row is dropped silently
    assert result.warnings == ["Row 2 skipped due to missing required fields"]
    assert "Row 2: missing name, skipping" in caplog.text


def test_import_csv_with_only_skipped_rows_is_not_a_success():
    result = import_contacts_from_csv("firstName,city\n,Rome\n")
    assert result.success is False
    assert result.contacts == []
    assert result.errors == []


def test_explicit_name_columns_win_over_combined_name():
    columns = detect_columns(["name", "firstName", "lastName"])
    contact = map_row(["Jane Q Doe", "Janet", ""], columns, 2)
    assert contact.first_name == "Janet"
    assert contact.last_name == "Q Doe"


def test_middle_name_prepended_to_last_name():
    columns = detect_columns(["First Name", "Middle Name", "Last Name"])
    assert map_row(["Ana", "Maria", "Souza"], columns, 2).last_name == "Maria Souza"
    assert map_row(["Ana", "Maria", ""], columns, 3).last_name == "Maria"


def test_city_and_country_fall_back_field_by_field():
    columns = detect_columns(["name", "city", "country", "Address 1 - City", "Address 1 - Country"])
    contact = map_row(["Ada Lovelace", "", "UK", "London", "United Kingdom"], columns, 2)
    assert contact.location.city == "London"
    assert contact.location.country == "UK"


def test_phone_fallback_fills_missing_coordinates():
    text = "name,city,country,lat,lng,Phone 1 - Value\nMax Mustermann,,,,,+49 30 1234567\n"
    result = import_contacts_from_csv(text)
    contact = result.contacts[0]
    assert (contact.location.lat, contact.location.lng) == (52.52, 13.405)
    assert contact.location.country == "Germany"
    assert contact.location.city == ""
    assert contact.attributes["phone"] == "+49 30 1234567"


def test_phone_fallback_ignored_when_coordinates_present():
    text = "name,country,lat,lng,Phone 1 - Value\nAmy Pond,,51.5,-0.12,+49 30 1234567\n"
    contact = import_contacts_from_csv(text).contacts[0]
    assert (contact.location.lat, contact.location.lng) == (51.5, -0.12)
    assert contact.location.country == ""


def test_phone_fallback_keeps_explicit_country_and_tries_second_phone():
    columns = detect_columns(["name", "country", "Phone 1 - Value", "Phone 2 - Value"])
    contact = map_row(["Yuki Sato", "Japan", "12345", "+81 3-1234-5678"], columns, 2)
    assert contact.location.country == "Japan"
    assert (contact.location.lat, contact.location.lng) == (35.6762, 139.6503)
    assert contact.attributes == {"phone": "12345", "phone2": "+81 3-1234-5678"}


def test_phone_fallback_can_fill_city_and_be_disabled():
    columns = detect_columns(["name", "Phone 1 - Value"])
    row = ["Omar Haddad", "+966 50 123 4567"]
    filled = map_row(row, columns, 2, settings=RowMappingSettings(fill_city_from_phone=True))
    assert filled.location.city == "Riyadh"
    assert filled.location.country == "Saudi Arabia"

    disabled = map_row(row, columns, 2, settings=RowMappingSettings(phone_fallback=False))
    assert disabled.location == Location()


def test_invalid_coordinates_warn_and_fall_through_to_phone(caplog):
    text = "name,lat,lng,Phone 1 - Value\nLea Roux,95,2.35,+33 1 23 45 67 89\nBo Li,abc,1,\n"
    with caplog.at_level(logging.WARNING):
        result = import_contacts_from_csv(text)
    lea, bo = result.contacts
    assert lea.location.country == "France"
    assert (lea.location.lat, lea.location.lng) == (48.8566, 2.3522)
    assert bo.location == Location()
    assert "Row 2: invalid lat/lng, using defaults" in result.warnings
    assert "Row 3: invalid lat/lng, using defaults" in result.warnings
    assert "invalid lat/lng" in caplog.text


@pytest.mark.parametrize(
    "raw, expected",
    [("1899", None), ("2100", None), ("abc", None), ("1900", None), ("1990", 1990), ("", None)],
)
def test_birth_year_bounds(raw, expected):
    columns = detect_columns(["name", "birthYear"])
    assert map_row(["Sam Hill", raw], columns, 2).birth_year == expected


def test_birthday_column_supplies_year_when_birth_year_missing():
    columns = detect_columns(["name", "birthYear", "Birthday"])
    assert map_row(["Sam Hill", "", "1985-04-12"], columns, 2).birth_year == 1985
    assert map_row(["Sam Hill", "1970", "1985-04-12"], columns, 2).birth_year == 1970
    assert map_row(["Sam Hill", "", "--04-12"], columns, 2).birth_year is None


def test_google_contacts_row():
    row = ",".join(
        [
            "Ana",
            "Maria",
            "Souza",
            "Aninha",
            "1985-04-12",
            "Met at a conference",
            "https://lh3.googleusercontent.com/a/photo.jpg",
            "Friends ::: * myContacts ::: *starred ::: Work",
            "ana@souza.dev",
            "Mobile",
            "+55 11 91234-5678",
            "São Paulo",
            "",
            "Acme",
            "Engineer",
            "https://ana.dev",
        ]
    )
    result = import_contacts_from_csv(f"{GOOGLE_HEADER}\n{row}\n")
    ana = result.contacts[0]
    assert ana.first_name == "Ana"
    assert ana.last_name == "Maria Souza"
    assert ana.birth_year == 1985
    assert ana.bio == "Met at a conference"
    assert ana.photo_url == "https://lh3.googleusercontent.com/a/photo.jpg"
    assert ana.tags == ["Friends", "Work"]
    assert ana.email == "ana@souza.dev"
    assert ana.location.city == "São Paulo"
    assert ana.location.country == "Brazil"
    assert ana.attributes == {
        "phone": "+55 11 91234-5678",
        "company": "Acme",
        "role": "Engineer",
        "nickname": "Aninha",
    }
    assert ana.social_links == [SocialLink(platform="website", url="https://ana.dev")]


def test_labels_come_before_roles_without_dedup():
    columns = detect_columns(["name", "Labels", "tags"])
    contact = map_row(["Kim Lee", "Friends ::: Climbing", "Climbing; ;Work"], columns, 2)
    assert contact.tags == ["Friends", "Climbing", "Climbing", "Work"]


def test_social_links_keep_raw_values_in_platform_order():
    columns = detect_columns(["name", "website", "github", "twitter", "linkedin", "instagram"])
    row = ["Kim Lee", "kim.dev", "github.com/kim", "", "linkedin.com/in/kim", "@kim"]
    contact = map_row(row, columns, 2)
    assert [(link.platform, link.url) for link in contact.social_links] == [
        ("linkedin", "linkedin.com/in/kim"),
        ("instagram", "@kim"),
        ("github", "github.com/kim"),
        ("website", "kim.dev"),
    ]


def test_local_photo_reference_is_not_a_url():
    columns = detect_columns(["name", "photo"])
    assert map_row(["Kim Lee", "photos/kim.jpg"], columns, 2).photo_url is None


def test_invalid_email_dropped_unless_check_disabled():
    columns = detect_columns(["name", "email"])
    warnings = []
    contact = map_row(["Kim Lee", "not-an-email"], columns, 2, warnings=warnings)
    assert contact.email is None
    assert warnings == ["Row 2: invalid email 'not-an-email' dropped"]

    lenient = RowMappingSettings(check_email_syntax=False)
    lenient_contact = map_row(["Kim Lee", "not-an-email"], columns, 2, settings=lenient)
    assert lenient_contact.email == "not-an-email"


def test_map_row_tolerates_short_rows():
    columns = detect_columns(["name", "city", "country", "lat", "lng", "languages"])
    contact = map_row(["Kim Lee"], columns, 2)
    assert contact.location == Location()
    assert contact.languages == []
    assert contact.attributes == {}
    assert contact.bio is None


def test_unterminated_quote_stays_on_its_line():
    rows = parse_csv_rows('name,bio\n"Jane Doe,never closed\nJohn Roe,fine\n')
    assert rows == [["name", "bio"], ["Jane Doe,never closed"], ["John Roe", "fine"]]


def test_oversized_cell_skips_only_its_row(caplog):
    text = "name,bio\nJane Doe,short\nJohn Roe," + "x" * 200000 + "\nKim Lee,also short\n"
    with caplog.at_level(logging.WARNING, logger="orbita_import.rows"):
        result = import_contacts_from_csv(text)

    assert result.success is True
    assert [c.first_name for c in result.contacts] == ["Jane", "Kim"]
    assert len(result.warnings) == 1
    assert result.warnings[0].startswith("Row 3: could not be parsed")
    assert "Row 3: could not be parsed" in caplog.text


def test_oversized_header_fails_the_import():
    result = import_contacts_from_csv("name," + "x" * 200000 + "\nJane Doe\n")
    assert result.success is False
    assert result.errors[0].startswith("Failed to parse CSV: ")


@pytest.mark.parametrize("lat, lng", [("nan", "1"), ("inf", "-inf"), ("1_0", "2"), ("5e", "3")])
def test_non_decimal_coordinates_are_treated_as_absent(lat, lng):
    result = import_contacts_from_csv(f"name,lat,lng\nJane Doe,{lat},{lng}\n")
    assert result.contacts[0].location == Location()
    assert result.warnings == ["Row 2: invalid lat/lng, using defaults"]


@pytest.mark.parametrize(
    "lat, lng, expected",
    [
        ("-33.87", "+151.21", (-33.87, 151.21)),
        (".5", "1e1", (0.5, 10.0)),
        ("45.", "7", (45.0, 7.0)),
    ],
)
def test_decimal_coordinate_forms(lat, lng, expected):
    result = import_contacts_from_csv(f"name,lat,lng\nJane Doe,{lat},{lng}\n")
    location = result.contacts[0].location
    assert (location.lat, location.lng) == expected
    assert result.warnings == []
