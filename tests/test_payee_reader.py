import pytest

from common.pix.payee_reader import list_payees


def test_list_payees_in_file_name_order(pix_keys_dir):
    directory = pix_keys_dir("c", "a", "b")
    (directory / "notes.txt").write_text("ignorar", encoding="utf-8")

    payees = list_payees(str(directory))

    assert [p.payee_id for p in payees] == ["a.json", "b.json", "c.json"]
    assert payees[0].pix_fields["pixAddressKey"] == "a@ejemplo.com"


def test_payee_fields_are_read_only(pix_keys_dir):
    payee = list_payees(str(pix_keys_dir("a")))[0]

    with pytest.raises(TypeError):
        payee.pix_fields["pixAddressKey"] = "otro"

    fields = payee.transfer_fields()
    fields["value"] = 1
    assert "value" not in payee.pix_fields


def test_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        list_payees(str(tmp_path / "nope"))


def test_non_object_json_is_rejected(tmp_path):
    directory = tmp_path / "pix-keys"
    directory.mkdir()
    (directory / "lista.json").write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError, match="lista.json"):
        list_payees(str(directory))


def test_payee_file_cannot_set_transfer_value(tmp_path):
    directory = tmp_path / "pix-keys"
    directory.mkdir()
    (directory / "ana.json").write_text(
        '{"pixAddressKey": "ana@ejemplo.com", "value": 999}', encoding="utf-8"
    )

    with pytest.raises(ValueError, match="ana.json"):
        list_payees(str(directory))
