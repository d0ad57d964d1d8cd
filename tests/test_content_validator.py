"""Tests for the static content validator."""

from smartconnect.security.content_validator import validate_content


def test_legitimate_complaint_is_valid():
    verdict = validate_content("The pothole on Main St is getting worse")
    assert verdict.is_valid
    assert verdict.reason == ""


def test_empty_and_whitespace_rejected():
    assert validate_content("").reason == "Empty content"
    assert validate_content("   \n\t").reason == "Empty content"
    assert validate_content(None).reason == "Empty content"


def test_spam_keyword_named_in_reason():
    verdict = validate_content("FREE MONEY now!!!")
    assert not verdict.is_valid
    assert verdict.reason == "Spam keyword detected: free money"


def test_keyword_match_is_substring():
    verdict = validate_content("Visit the casinoroyale for prizes")
    assert verdict.reason == "Spam keyword detected: casino"


def test_suspicious_tld_url():
    verdict = validate_content("Report the issue at http://fix-roads.xyz today")
    assert not verdict.is_valid
    assert verdict.reason == "Suspicious pattern detected in content"


def test_card_like_digits():
    verdict = validate_content("pay with 4111 1111 1111 1111 please")
    assert verdict.reason == "Suspicious pattern detected in content"


def test_three_urls():
    text = "see http://a.com and http://b.com and http://c.com"
    assert validate_content(text).reason == "Suspicious pattern detected in content"


def test_two_urls_allowed():
    text = "photos at http://a.com and http://b.com of the broken drain"
    assert validate_content(text).is_valid


def test_long_character_run():
    assert validate_content("help!!!!!!!!!!!!").reason == "Suspicious pattern detected in content"


def test_ten_uppercase_letters_is_excessive_caps():
    verdict = validate_content("AAAAAAAAAA")
    assert not verdict.is_valid
    assert verdict.reason == "Excessive capitalization detected"


def test_short_shouting_is_allowed():
    assert validate_content("FIX IT").is_valid


def test_half_caps_is_allowed():
    # exactly 50% uppercase is not "more than half"
    assert validate_content("ABCDEfghij").is_valid


def test_keywords_checked_before_caps():
    verdict = validate_content("CONGRATULATIONS YOU WON")
    assert verdict.reason == "Spam keyword detected: congratulations"
