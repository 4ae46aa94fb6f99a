from pattern_matcher import Label, PatternMatcher


def test_find_all_labels():
    """Test label detection with the separators monitors print."""
    matcher = PatternMatcher()
    test_cases = [
        "SYS 128 DIA 79 PUL 61",
        "Sys. 128 Dia. 79 Pul. 61",
        "SYS:128 DIA:79 PUL:61",
        "SYS mmHg 128 DIA mmHg 79 PUL /min 61",
        "SYSTOLIC 128 DIASTOLIC 79 PULSE 61",
    ]

    for text in test_cases:
        labels = matcher.find_labels(text)
        assert {label: n.value for label, n in labels.items()} == {
            Label.SYS: 128,
            Label.DIA: 79,
            Label.PUL: 61,
        }, text


def test_labels_are_independent():
    matcher = PatternMatcher()

    labels = matcher.find_labels("PUL 70")
    assert list(labels) == [Label.PUL]
    assert labels[Label.PUL].value == 70

    labels = matcher.find_labels("DIA 85 SYS 130")
    assert labels[Label.SYS].value == 130
    assert labels[Label.DIA].value == 85
    assert Label.PUL not in labels


def test_first_match_wins():
    labels = PatternMatcher().find_labels("SYS 120 SYS 140")
    assert labels[Label.SYS].value == 120


def test_rejected_matches():
    """Labels without a nearby 2-3 digit value are ignored."""
    matcher = PatternMatcher()
    test_cases = [
        "",
        "No readings here",
        "SYS ------------ 120",  # too far from the label
        "SYS 7",                 # single digit
        "MEDIA 80",              # DIA inside another word
    ]

    for text in test_cases:
        assert matcher.find_labels(text) == {}, text


def test_match_position():
    number = PatternMatcher().find_labels("SYS: 153")[Label.SYS]
    assert (number.start, number.end) == (5, 8)
    assert number.raw_text == "SYS: 153"


def test_long_runs_after_label():
    """A label takes the first 2-3 digits of a longer run, like the numbers scan does."""
    matcher = PatternMatcher()

    labels = matcher.find_labels("SYS 1530")
    assert labels[Label.SYS].value == 153

    labels = matcher.find_labels("SYS1530DIA102PUL88")
    assert {label: n.value for label, n in labels.items()} == {
        Label.SYS: 153,
        Label.DIA: 102,
        Label.PUL: 88,
    }
