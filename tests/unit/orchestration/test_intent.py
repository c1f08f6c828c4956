"""Tests for IntentClassifier"""
import pytest

from autodev.config.schema import IntentConfig
from autodev.orchestration.intent import IntentClassifier


@pytest.fixture
def classifier():
    return IntentClassifier()


@pytest.mark.parametrize(
    "text,category",
    [
        ("create a landing page", "create"),
        ("fix the login error", "fix"),
        ("optimize query speed", "optimize"),
        ("refactor the payment module", "improve"),
        ("investigate flaky tests", "explore"),
        ("update the readme", "maintain"),
        ("", "maintain"),
    ],
)
def test_category(classifier, text, category):
    assert classifier.classify(text).category == category


def test_create_checked_before_fix(classifier):
    """Text matching both create and fix vocabularies is a create request."""
    assert classifier.classify("fix the bug and build a new page").category == "create"


def test_fix_checked_before_optimize(classifier):
    assert classifier.classify("fix the performance problem").category == "fix"


def test_matching_is_case_insensitive_substring(classifier):
    assert classifier.classify("REBUILD everything").category == "create"


@pytest.mark.parametrize(
    "text,urgency",
    [
        ("fix this ASAP", "critical"),
        ("emergency outage", "critical"),
        ("important change needed", "high"),
        ("whenever convenient", "medium"),
    ],
)
def test_urgency(classifier, text, urgency):
    assert classifier.classify(text).urgency == urgency


def test_urgent_wins_over_high(classifier):
    assert classifier.classify("important and urgent").urgency == "critical"


def test_domain_first_listed_match(classifier):
    assert classifier.classify("build a web dashboard with an api").domain == "web"
    assert classifier.classify("tune the database indexes").domain == "database"
    assert classifier.classify("write docs").domain == "general"


@pytest.mark.parametrize(
    "text,scope",
    [
        ("redesign the system architecture", "architecture"),
        ("improve efficiency of loops", "performance"),
        ("start a new project", "project"),
        ("add a button", "feature"),
    ],
)
def test_scope(classifier, text, scope):
    assert classifier.classify(text).scope == scope


def test_keywords_filtered_and_capped(classifier):
    intent = classifier.classify("Build a fast API for user accounts and billing in one two three go")

    assert intent.keywords[:3] == ("build", "fast", "user")
    assert all(len(word) >= 4 for word in intent.keywords)

    long_text = " ".join(f"word{i}" for i in range(20))
    assert len(classifier.classify(long_text).keywords) == 10


def test_custom_vocabulary():
    config = IntentConfig(categories={"ship": ["release"]}, domains=["cli"])
    intent = IntentClassifier(config).classify("release the cli")

    assert intent.category == "ship"
    assert intent.domain == "cli"


def test_to_dict(classifier):
    data = classifier.classify("create a mobile app asap").to_dict()

    assert data["category"] == "create"
    assert data["domain"] == "mobile"
    assert data["urgency"] == "critical"
    assert isinstance(data["keywords"], list)
