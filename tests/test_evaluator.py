import math
from collections import Counter

from unientropy.config import Settings
from unientropy.evaluator import Estimator, coerce_password, fold_tallies

FAMILY = "\U0001F468\u200d\U0001F469\u200d\U0001F467\u200d\U0001F466"
DOG = "\U0001F436"
SOCCER = "\u26bd\ufe0f"

est = Estimator()
control = est.estimate("distance")


class Unprintable:
    def __str__(self):
        raise RuntimeError("no")

    def __repr__(self):
        raise RuntimeError("no")


def test_result_shape_for_odd_inputs():
    long_text = "The quick brown fox jumps over the lazy dog. " * 200 + "魏柏特" + FAMILY
    for value in (None, "", {}, [], 12345, 3.5, b"pass\xffword", Unprintable(),
                  "\ud800", "\udc00abc", "\u200b\u200d", long_text):
        e = est.estimate(value)
        assert set(e) == {"length", "sets", "entropy", "max_entropy_scale",
                          "acceptable", "ideal", "legal"}
        assert e["entropy"] >= 0
        assert not (e["ideal"] and not e["acceptable"])


def test_empty_and_ignorable_only():
    for value in (None, "", "\u200b\ufe0f"):
        e = est.estimate(value)
        assert e["length"] == 0
        assert e["entropy"] == 0
        assert e["sets"] == []
        assert not e["acceptable"]
        assert e["legal"]
    assert est.estimate()["length"] == 0


def test_coerce_password():
    assert coerce_password(None) == ""
    assert coerce_password(42) == "42"
    assert coerce_password(b"abc") == "abc"
    assert coerce_password(Unprintable()) == ""


def test_idempotent():
    assert est.estimate("Tr0ub4dor&3") == est.estimate("Tr0ub4dor&3")


def test_simple_password():
    test1 = est.estimate("distances")  # same password with a repeated letter
    test2 = est.estimate("distancez")  # same password with a unique letter
    test3 = est.estimate("distance1")  # with a number
    test4 = est.estimate("Distance1")  # with a capital and a number
    assert control["sets"] == ["latin-small"]
    assert control["entropy"] == math.log(26) * 8

    assert test1["length"] == control["length"]
    assert test1["entropy"] == control["entropy"]
    assert test2["length"] == control["length"] + 1
    assert len(test2["sets"]) == 1
    assert test2["entropy"] > control["entropy"]
    assert len(test3["sets"]) == 2
    assert test3["entropy"] > test2["entropy"]
    assert test4["length"] == control["length"] + 1
    assert len(test4["sets"]) == 3
    assert test4["entropy"] > test3["entropy"]


def test_special_characters():
    number = est.estimate("distance1")
    plus = est.estimate("distance+")
    colon = est.estimate("distance:")
    for e in (plus, colon):
        assert "special" in e["sets"]
        assert e["length"] == number["length"]
        # special is a larger class than number
        assert e["entropy"] > number["entropy"]
    assert plus["entropy"] == colon["entropy"]


def test_emoji():
    number = est.estimate("distance1")
    single = est.estimate("distance" + DOG)
    family = est.estimate("distance" + FAMILY)
    twice = est.estimate("distance" + FAMILY + FAMILY)
    for e in (single, family, twice):
        assert "emoji" in e["sets"]
        assert e["length"] == number["length"]
        assert e["entropy"] > number["entropy"]
    assert single["entropy"] == family["entropy"]
    assert family["entropy"] == twice["entropy"]


def test_hanzi_common_and_rare():
    common = est.estimate("distance我")
    common_twice = est.estimate("distance我我")
    rare = est.estimate("distance魏")
    rare_twice = est.estimate("distance魏魏")
    assert "common-hanzi" in common["sets"]
    assert "hanzi" in rare["sets"]
    assert common["entropy"] == common_twice["entropy"]
    assert rare["entropy"] == rare_twice["entropy"]
    # less common hanzi score higher
    assert rare["entropy"] > common["entropy"]


def test_hanzi_mix_folds_into_dominant_kind():
    three_common = est.estimate("我的心")
    three_rare = est.estimate("魏柏特")
    one_common_two_rare = est.estimate("我柏特")
    two_common_one_rare = est.estimate("我的魏")

    assert one_common_two_rare["sets"] == ["hanzi"]
    assert one_common_two_rare["entropy"] == three_rare["entropy"]
    assert two_common_one_rare["sets"] == ["common-hanzi"]
    assert two_common_one_rare["entropy"] == three_common["entropy"]


def test_fold_tallies_needs_double():
    pairs = [("common-hanzi", "hanzi")]
    assert fold_tallies(Counter({"common-hanzi": 2, "hanzi": 3}), pairs) == Counter(
        {"common-hanzi": 2, "hanzi": 3})
    assert fold_tallies(Counter({"common-hanzi": 4, "hanzi": 2}), pairs) == Counter(
        {"common-hanzi": 6})
    assert fold_tallies(Counter({"hanzi": 2}), pairs) == Counter({"hanzi": 2})


def test_bad_passwords():
    bad1 = est.estimate("123456789")
    bad2 = est.estimate("12e456789")
    bad3 = est.estimate("h3Ll0hi")
    bad4 = est.estimate("hih3ll0")
    assert bad1["sets"] == ["common-password"]
    assert bad2["sets"] == ["common-password"]
    assert bad2["entropy"] == bad1["entropy"]
    assert set(bad3["sets"]) == {"common-password", "latin-small"}
    assert control["entropy"] > bad3["entropy"] > bad1["entropy"]
    assert bad3["entropy"] == bad4["entropy"]


def test_monotonic_in_new_classes():
    base = est.estimate("abc")
    grown = est.estimate("abcD")
    assert grown["entropy"] >= base["entropy"]
    assert len(grown["sets"]) >= len(base["sets"])
    # a duplicate changes nothing
    assert est.estimate("abca")["entropy"] == base["entropy"]


def test_new_class_character_completing_a_common_password():
    # "hell0" folds to the weak password "hello", so one added digit
    # collapses four letters into a single low-weight token
    hell = est.estimate("hell")
    hell0 = est.estimate("hell0")
    assert hell["sets"] == ["latin-small"]
    assert hell0["sets"] == ["common-password"]
    assert hell0["entropy"] < hell["entropy"]
    assert len(hell0["sets"]) == len(hell["sets"])


def test_invisible_characters_do_not_hide_common_passwords():
    plain = est.estimate("password")
    hidden = est.estimate("p\u200bass\u200dword")
    assert hidden["sets"] == ["common-password"]
    assert hidden["entropy"] == plain["entropy"]


def test_unknown_code_points():
    e = est.estimate("aԱ")  # Armenian capital AYB
    assert "unknown" in e["sets"]
    assert e["legal"]


def test_thresholds():
    e = Estimator(settings=Settings(min_acceptable=1, min_ideal=2)).estimate("password")
    assert e["acceptable"] and e["ideal"]
    e = Estimator(settings=Settings(min_acceptable=11, min_ideal=12)).estimate("password")
    assert not e["acceptable"] and not e["ideal"]
    e = Estimator(settings=Settings(min_acceptable=1)).estimate("password")
    assert e["acceptable"] and not e["ideal"]
    # ideal below acceptable means ideal == acceptable
    e = Estimator(settings=Settings(min_acceptable=11, min_ideal=1)).estimate("password")
    assert not e["acceptable"] and not e["ideal"]


def test_legality_with_allowed_sets():
    def legal(allowed, password):
        return Estimator(settings=Settings(allowed_sets=allowed)).estimate(password)["legal"]

    assert legal("all", "passw" + SOCCER + "rd")
    assert legal(["latin-small", "emoji", "common-password"], "passw" + SOCCER + "rd")
    assert not legal(["latin-small", "emoji", "common-password"], "paXXword")

    assert not legal(["latin-small"], "passw" + SOCCER + "rd")
    assert not legal("latin-small", "passw" + SOCCER + "rd")
    assert legal("latin-small", "paxxword")
    assert not legal("latin-small", "paxx1word")
    # a weak password is legal when its characters are
    assert legal("latin-small", "password")
    assert not legal("latin-small", "passw0rd")

    assert not legal("western", "passw" + SOCCER + "rd")
    assert legal("western", "paxxword")
    assert legal(["western", "emoji", "common-password"], "passw" + SOCCER + "rd")
    assert legal(["western", "emoji", "common-password"], "paxxword")
    assert not legal(["western", "emoji", "common-password"], "писанка")
    assert legal("all", "писанка")

    # unknown characters need "unknown" in the list
    assert not legal("western", "aԱ")
    assert legal(["western", "unknown"], "aԱ")


def test_illegal_tokens_are_reported():
    e = Estimator(settings=Settings(allowed_sets="latin-small")).estimate("abc1")
    assert not e["legal"]
    assert "illegal" in e["sets"]
    assert "number" not in e["sets"]
    assert e["length"] == 4


def test_estimators_do_not_share_state():
    strict = Estimator(settings=Settings(allowed_sets="latin-small"))
    assert not strict.estimate("abc1")["legal"]
    assert Estimator().estimate("abc1")["legal"]


def test_describe():
    rows = est.describe("aԱ")
    assert rows[0]["set"] == "latin-small"
    assert rows[0]["known"]
    assert rows[1]["set"] == "unknown"
    assert rows[1]["open"][0].startswith("U+")
