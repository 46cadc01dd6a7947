"""
Test coverage for composer.generator.extractors.

Tests cover:
- Schedule rules (intervals, weekdays, clock times, cron)
- Webhook and event paths
- Chat, email, HTTP, SMS and wait parameters
- Generic operation and quoted literal passes
- Field renaming and parameter merging
"""

import pytest

from composer.catalog import NodeTypeDescriptor
from composer.errors import CatalogError
from composer.generator.extractors import (
    extract_chat,
    extract_email,
    extract_event,
    extract_http,
    extract_operation,
    extract_parameters,
    extract_schedule,
    extract_sms,
    extract_wait,
    extract_webhook,
    merge_parameters,
    quoted_literals,
)


def interval(result):
    return result["rule"]["interval"][0]


# ============================================================================
# SCHEDULE TESTS
# ============================================================================

class TestScheduleExtraction:
    """Test cases for schedule trigger rules."""

    @pytest.fixture
    def schedule(self, catalog):
        return catalog.get("schedule")

    def test_daily_at_time(self, schedule):
        """Test "every day at 9am" sets the hour of a daily rule."""
        result = extract_schedule("Every day at 9am", schedule)

        assert interval(result) == {"field": "days", "triggerAtHour": 9, "triggerAtMinute": 0}

    def test_every_n_minutes(self, schedule):
        """Test numeric intervals."""
        result = extract_schedule("every 15 minutes", schedule)

        assert interval(result) == {"field": "minutes", "minutesInterval": 15}

    def test_weekdays_with_pm_time(self, schedule):
        """Test named weekdays and a 12-hour clock time."""
        result = extract_schedule("every Monday and Friday at 5:30 pm", schedule)

        assert interval(result) == {
            "field": "weeks",
            "triggerAtDay": [1, 5],
            "triggerAtHour": 17,
            "triggerAtMinute": 30,
        }

    def test_weekday_keyword_and_24h_clock(self, schedule):
        """Test "every weekday at 17:00"."""
        result = extract_schedule("every weekday at 17:00", schedule)

        assert interval(result)["triggerAtDay"] == [1, 2, 3, 4, 5]
        assert interval(result)["triggerAtHour"] == 17

    def test_every_n_weeks_on_day(self, schedule):
        """Test a numeric week interval keeps the weekday."""
        result = extract_schedule("every 2 weeks on Monday at 9am", schedule)

        assert interval(result) == {
            "field": "weeks",
            "weeksInterval": 2,
            "triggerAtDay": [1],
            "triggerAtHour": 9,
            "triggerAtMinute": 0,
        }

    @pytest.mark.parametrize("text,hour", [
        ("every morning", 9),
        ("every evening", 18),
        ("nightly", 0),
        ("every day at noon", 12),
        ("daily at midnight", 0),
        ("each day at 12am", 0),
        ("each day at 12pm", 12),
    ])
    def test_time_words(self, schedule, text, hour):
        """Test day parts and named times."""
        result = extract_schedule(text, schedule)

        assert interval(result)["field"] == "days"
        assert interval(result)["triggerAtHour"] == hour

    def test_hourly_keeps_only_minute(self, schedule):
        """Test hourly rules ignore the hour of a clock time."""
        assert interval(extract_schedule("every hour", schedule)) == {"field": "hours"}
        assert interval(extract_schedule("hourly at 10:15", schedule)) == {"field": "hours", "triggerAtMinute": 15}

    def test_cron_expression(self, schedule):
        """Test a quoted cron expression."""
        result = extract_schedule('on the cron schedule "0 9 * * 1-5"', schedule)

        assert interval(result) == {"field": "cronExpression", "expression": "0 9 * * 1-5"}

    def test_nothing_recognised(self, schedule):
        """Test unknown schedules leave the defaults alone."""
        assert extract_schedule("on a schedule", schedule) == {}

    def test_invalid_clock_is_ignored(self, schedule):
        """Test out of range times are dropped."""
        assert interval(extract_schedule("every day at 25:00", schedule)) == {"field": "days"}


# ============================================================================
# TRIGGER PATH TESTS
# ============================================================================

class TestWebhookExtraction:
    """Test cases for webhook and event triggers."""

    def test_path_and_method(self, catalog):
        """Test an explicit path and HTTP verb."""
        result = extract_webhook("When a POST request hits /orders/new", catalog.get("webhook"))

        assert result == {"path": "orders/new", "httpMethod": "POST"}

    def test_quoted_path(self, catalog):
        """Test a quoted literal becomes a slug path."""
        result = extract_webhook('When the "Order Created" webhook is called', catalog.get("webhook"))

        assert result == {"path": "order-created"}

    def test_lowercase_method_needs_request(self, catalog):
        """Test lowercase verbs only count as "get request"."""
        result = extract_webhook("When a get request comes in", catalog.get("webhook"))

        assert result == {"httpMethod": "GET"}

    def test_url_is_not_a_path(self, catalog):
        """Test slashes inside URLs are not webhook paths."""
        assert extract_webhook("When https://example.com/hook is called", catalog.get("webhook")) == {}

    def test_event_slug(self, catalog):
        """Test event paths drop cue and stop words."""
        event = catalog.get("event")

        assert extract_event("When a new support ticket is created", event) == {"path": "support-ticket-created"}
        assert extract_event("When a new lead is added to the CRM", event) == {"path": "lead-added-crm"}
        assert extract_event("When", event) == {}


# ============================================================================
# ACTION TESTS
# ============================================================================

class TestChatExtraction:
    """Test cases for chat destinations."""

    @pytest.fixture
    def slack(self, catalog):
        return catalog.get("slack")

    def test_no_channel(self, slack):
        assert extract_chat("post a summary to Slack", slack) == {}

    def test_hash_channel(self, slack):
        assert extract_chat("post it to #alerts on Slack", slack) == {"channel": "#alerts"}

    def test_named_channel(self, slack):
        assert extract_chat("post to the support channel in Slack", slack) == {"channel": "#support"}

    def test_channel_and_text(self, slack):
        """Test a quoted literal is the text when the channel is explicit."""
        result = extract_chat('post "Build failed" to #ci', slack)

        assert result == {"channel": "#ci", "text": "Build failed"}

    def test_single_word_literal_is_channel(self, slack):
        assert extract_chat('post to "alerts" on Slack', slack) == {"channel": "alerts"}

    def test_sentence_literal_is_text(self, slack):
        assert extract_chat('post "Deploy finished" on Slack', slack) == {"text": "Deploy finished"}


class TestMessageExtraction:
    """Test cases for email, HTTP, SMS and wait parameters."""

    def test_email_addresses(self, catalog):
        """Test all addresses are collected once."""
        result = extract_email(
            "Email the report to jane@example.com and bob@example.com, cc jane@example.com",
            catalog.get("email"),
        )

        assert result == {"toEmail": "jane@example.com, bob@example.com"}

    def test_email_subject(self, catalog):
        result = extract_email('Send an email with subject "Weekly report"', catalog.get("email"))

        assert result == {"subject": "Weekly report"}

    def test_http_url_and_method(self, catalog):
        """Test URL extraction strips trailing punctuation."""
        http = catalog.get("http")

        assert extract_http("fetch https://api.example.com/v1/users.", http) == {
            "url": "https://api.example.com/v1/users",
        }
        assert extract_http("POST the payload to https://hooks.example.com/in", http) == {
            "url": "https://hooks.example.com/in",
            "method": "POST",
        }
        assert extract_http("delete the record via the API", http) == {"method": "DELETE"}
        assert extract_http("get the data", http) == {}

    def test_http_method_nouns_ignored(self, catalog):
        """Test "post" as a noun does not change the method."""
        http = catalog.get("http")

        assert extract_http("Fetch the latest blog post from https://example.com/api/posts", http) == {
            "url": "https://example.com/api/posts",
        }
        assert extract_http("also put the record into the API", http) == {"method": "PUT"}
        assert extract_http("call the API with a patch request", http) == {"method": "PATCH"}

    def test_http_method_in_document(self, document_for):
        document = document_for("Fetch the latest blog post from https://example.com/api/posts")

        assert document["nodes"][1]["parameters"]["method"] == "GET"

    def test_sms(self, catalog):
        result = extract_sms('text "Server down" to +1 (555) 123-4567 via SMS', catalog.get("twilio"))

        assert result == {"to": "+15551234567", "message": "Server down"}

    @pytest.mark.parametrize("text,expected", [
        ("wait 5 minutes", {"amount": 5, "unit": "minutes"}),
        ("pause for 2 days", {"amount": 2, "unit": "days"}),
        ("wait an hour", {"amount": 1, "unit": "hours"}),
        ("wait a bit", {}),
    ])
    def test_wait(self, catalog, text, expected):
        assert extract_wait(text, catalog.get("wait")) == expected


# ============================================================================
# GENERIC PASS TESTS
# ============================================================================

class TestExtractParameters:
    """Test cases for extract_parameters and helpers."""

    def test_operation_from_verb(self, catalog):
        """Test the first known verb selects the operation."""
        operations = catalog.get("notion").operations

        assert extract_operation("update the Notion CRM page", operations) == "update"
        assert extract_operation("add a page to Notion", operations) == "create"
        assert extract_operation("Notion", operations) is None
        assert extract_operation("anything", {}) is None

    def test_operation_and_quoted_field(self, catalog):
        """Test the generic passes combine."""
        result = extract_parameters(catalog.get("notion"), 'create a Notion page called "Q3 plan"')

        assert result == {"operation": "create", "title": "Q3 plan"}

    def test_field_map_renames(self, catalog):
        """Test extracted keys are renamed to the node's field names."""
        assert extract_parameters(catalog.get("gmail"), "Email jane@example.com via Gmail") == {
            "sendTo": "jane@example.com",
        }
        assert extract_parameters(catalog.get("telegram"), 'send it to "12345" on Telegram') == {
            "chatId": "12345",
        }

    def test_nothing_extracted(self, catalog):
        assert extract_parameters(catalog.get("http"), "fetch the customer's details") == {}

    def test_unknown_extractor(self):
        """Test a descriptor naming an unknown extractor is a catalog defect."""
        descriptor = NodeTypeDescriptor(
            key="broken", type_id="n8n-nodes-base.noOp", type_version=1, label="Broken",
            category="action", kind="data", match_keywords=("broken",), extractor="missing",
        )

        with pytest.raises(CatalogError, match="Unknown parameter extractor 'missing'"):
            extract_parameters(descriptor, "broken clause")

    def test_quoted_literals(self):
        assert quoted_literals('say "hi" and \'bye\' but not don\'t') == ["hi", "bye"]

    def test_merge_parameters(self):
        """Test nested mappings merge and other values replace."""
        base = {"a": {"b": 1, "c": 2}, "items": [1], "keep": True}

        merged = merge_parameters(base, {"a": {"b": 3}, "items": [2]})

        assert merged == {"a": {"b": 3, "c": 2}, "items": [2], "keep": True}
        assert merged is base
