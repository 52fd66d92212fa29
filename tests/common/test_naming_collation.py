from mediatags.common.naming.collation import collation_key, fold_name


def test_fold_name_ignores_case_and_outer_whitespace():
    assert fold_name("  Travel ") == fold_name("travel") == fold_name("TRAVEL")


def test_fold_name_collapses_inner_whitespace():
    assert fold_name("Road   Trip") == fold_name("road trip")


def test_fold_name_uses_casefold_and_nfkc():
    assert fold_name("Straße") == fold_name("STRASSE")
    # full-width letters normalize to ASCII
    assert fold_name("ＷＯＲＫ") == fold_name("work")


def test_fold_name_keeps_accents_significant():
    assert fold_name("Café") != fold_name("Cafe")


def test_fold_name_none_is_empty():
    assert fold_name(None) == ""


def test_collation_key_orders_like_a_human_list():
    names = ["café", "banana", "cafe", "Banana", "apple", "Äpfel"]
    assert sorted(names, key=collation_key) == ["Äpfel", "apple", "Banana", "banana", "cafe", "café"]
