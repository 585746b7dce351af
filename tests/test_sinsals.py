"""Sinsal auxiliary stars."""

from saju.sinsals import SINSAL_INFO, Sinsal, analyze_sinsals


def test_reference_chart(reference_pillars):
    result = analyze_sinsals(*reference_pillars)
    assert result.summary == {
        Sinsal.PEACH_BLOSSOM: ("hour",),
        Sinsal.FLOWERY_CANOPY: ("month",),
        Sinsal.GHOST_GATE: ("hour",),
        Sinsal.SKY_NOBLE: ("day",),
        Sinsal.LITERARY_NOBLE: ("day",),
        Sinsal.BLOOD_KNIFE: ("hour",),
    }


def test_star_found_from_two_bases_reported_once(reference_pillars):
    # 巳 (year) and 酉 (day) both point peach blossom at 午
    result = analyze_sinsals(*reference_pillars)
    peach = [m for m in result.matches if m.sinsal is Sinsal.PEACH_BLOSSOM]
    assert len(peach) == 1
    assert len(result.matches) == len(set(result.matches))


def test_virtues_match_stems():
    result = analyze_sinsals("甲子", "丙寅", "丁卯", "庚子")
    assert result.summary[Sinsal.HEAVENLY_VIRTUE] == ("day",)
    assert result.summary[Sinsal.MONTHLY_VIRTUE] == ("month",)


def test_every_star_has_labels():
    assert set(SINSAL_INFO) == set(Sinsal)
    assert Sinsal.SKY_NOBLE.hanja == "天乙貴人"
    assert Sinsal.BLOOD_KNIFE.nature == "inauspicious"
    assert Sinsal.SKY_HORSE.korean == "역마살"
