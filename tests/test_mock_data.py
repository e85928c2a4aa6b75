from coaching.mock_data import PROFILES, generate_mock_matches
from coaching.normalize import normalize_matches


def test_same_account_same_history() -> None:
    assert generate_mock_matches("123", 10) == generate_mock_matches("123", 10)
    assert generate_mock_matches("123", 10) != generate_mock_matches("124", 10)


def test_profile_ranges() -> None:
    matches = normalize_matches(generate_mock_matches("5", 30, profile="support"))
    assert len(matches) == 30
    low, high = PROFILES["support"]["gold_per_min"]
    assert all(low <= m.gold_per_min <= high for m in matches)
    assert all(m.hero_id in PROFILES["support"]["heroes"] for m in matches)
