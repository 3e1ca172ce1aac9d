from obfuscation.obfuscator import Obfuscator
from utils.mapping_frame import MAPPING_COLUMNS, category_counts, mappings_to_frame


def test_mappings_to_frame_flattens_tables():
    obfuscator = Obfuscator()
    obfuscator.obfuscate_value({"ip": "192.168.1.100", "port": 27017, "email": "user@example.com"})

    frame = mappings_to_frame(obfuscator.get_mappings())

    assert list(frame.columns) == MAPPING_COLUMNS
    assert len(frame) == 3
    assert set(frame["Category"]) == {"ip", "integer", "name"}
    row = frame[frame["Category"] == "integer"].iloc[0]
    assert row["Original"] == "27017"
    assert row["Obfuscated"] == str(int(27017 * 0.917))


def test_mappings_to_frame_empty():
    frame = mappings_to_frame(Obfuscator().get_mappings())

    assert frame.empty
    assert list(frame.columns) == MAPPING_COLUMNS
    assert category_counts(frame).empty


def test_category_counts():
    frame = mappings_to_frame({"ip_map": {"a": "b", "c": "d"}, "mac_map": {"e": "f"}, "coefficient": 0.9})

    counts = category_counts(frame)

    assert counts.to_dict() == {"ip": 2, "mac": 1}
    assert counts.name == "Count"
