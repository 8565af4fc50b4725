import pytest

from gyb_data.records import (
    load_sponsors,
    normalize_keys,
    position_from_mapping,
    positions_from_records,
    sponsor_from_mapping,
    sponsors_from_records,
)


def test_normalize_keys_maps_camel_case_and_drops_blanks():
    raw = {"_id": "abc", "displayName": "Acme", "logoUrl": "  ", "amount": float("nan"), "message": None}
    assert normalize_keys(raw) == {"id": "abc", "display_name": "Acme"}


def test_sponsor_from_backend_mapping():
    sponsor = sponsor_from_mapping(
        {
            "_id": "64ab",
            "name": "Acme Bakery",
            "amount": "75.5",
            "sponsorType": "Logo",
            "logoUrl": "https://cdn.example/acme.png",
            "logoApprovalStatus": "approved",
            "paymentStatus": "PAID",
            "calculatedLogoWidth": 80,
            "displaySize": "Large",
            "positionId": 12,
        }
    )
    assert sponsor.id == "64ab"
    assert sponsor.amount == 75.5
    assert sponsor.sponsor_type == "logo"
    assert sponsor.is_approved
    assert sponsor.payment_status == "paid"
    assert sponsor.logo_width == 80
    assert sponsor.display_size == "large"
    assert sponsor.position_id == "12"


def test_sponsor_defaults_for_missing_fields():
    sponsor = sponsor_from_mapping({"name": "Anon"}, index=4)
    assert sponsor.id == "sponsor-5"
    assert sponsor.amount_value == 0
    assert sponsor.sponsor_type == "text"
    assert sponsor.payment_status == "paid"
    assert sponsor.display_size == "medium"
    assert sponsor.font_size == 16
    assert sponsor.logo_width == 100


def test_sponsor_malformed_values_recover():
    sponsor = sponsor_from_mapping(
        {"name": "Odd", "amount": "n/a", "sponsorType": "banner", "calculatedFontSize": -3, "displaySize": "huge"}
    )
    assert sponsor.amount_value == 0
    assert sponsor.sponsor_type == "text"
    assert sponsor.calculated_font_size is None
    assert sponsor.display_size == "medium"


def test_sponsor_record_must_be_mapping():
    with pytest.raises(ValueError, match="Sponsor record 2"):
        sponsors_from_records([{"name": "ok"}, "not a record"])


def test_position_from_mapping():
    position = position_from_mapping({"positionId": 7.0, "price": "15", "isTaken": "yes", "section": "top"})
    assert position.position_id == "7"
    assert position.price == 15
    assert position.is_taken is True
    assert position.section == "top"


def test_positions_default_ids():
    positions = positions_from_records([{"price": 5}, {"price": 10, "row": 2, "col": 1}])
    assert [p.position_id for p in positions] == ["1", "2"]
    assert (positions[1].row, positions[1].col) == (2, 1)
    assert positions[0].row is None


def test_positions_must_be_list():
    with pytest.raises(ValueError):
        positions_from_records({"1": {}})


def test_load_sponsors_csv(tmp_path):
    csv_file = tmp_path / "sponsors.csv"
    csv_file.write_text(
        "id,name,amount,sponsorType,positionId,paymentStatus\n"
        "007,Acme,50,text,01,paid\n"
        "008,Beta,,logo,,pending\n"
    )
    sponsors = load_sponsors(csv_file)
    assert [s.id for s in sponsors] == ["007", "008"]
    assert sponsors[0].position_id == "01"
    assert sponsors[0].amount == 50
    assert sponsors[1].amount_value == 0
    assert sponsors[1].position_id is None
    assert sponsors[1].is_pending_payment


@pytest.mark.parametrize(
    "content",
    [
        "- {name: Acme, amount: 10}\n- {name: Beta, amount: 20}\n",
        "sponsors:\n  - {name: Acme, amount: 10}\n  - {name: Beta, amount: 20}\n",
    ],
)
def test_load_sponsors_yaml(tmp_path, content):
    yaml_file = tmp_path / "sponsors.yml"
    yaml_file.write_text(content)
    sponsors = load_sponsors(yaml_file)
    assert [(s.name, s.amount) for s in sponsors] == [("Acme", 10), ("Beta", 20)]


def test_load_sponsors_rejects_unknown_suffix(tmp_path):
    json_file = tmp_path / "sponsors.json"
    json_file.write_text("[]")
    with pytest.raises(ValueError, match="Unsupported sponsor file type"):
        load_sponsors(json_file)
