#!/usr/bin/env python3
"""Tests for feed fetching and item selection."""

import json
import os
import tempfile
import unittest
from datetime import date
from unittest.mock import Mock, patch

import pytest
import requests

from conftest import (
    build_rss_xml,
    create_test_feed_item,
    TEST_FEED_URL,
    TEST_MEDIA_URL,
    TEST_MEDIA_URL_2,
    TEST_MEDIA_URL_3,
)
from shownotes import config, feed_selector
from shownotes.exceptions import (
    FeedFetchError,
    FeedFetchTimeoutError,
    InvalidSelectionError,
    NoMatchingItemsError,
)

TEST_MEDIA_URL_4 = "https://example.com/episode4.mp3"


def _feed_items():
    """Four items in feed order (newest first)."""
    return [
        create_test_feed_item(show_link=TEST_MEDIA_URL, title="Four", publish_date="2024-03-15"),
        create_test_feed_item(show_link=TEST_MEDIA_URL_2, title="Three", publish_date="2024-03-10"),
        create_test_feed_item(show_link=TEST_MEDIA_URL_3, title="Two", publish_date="2024-03-01"),
        create_test_feed_item(show_link=TEST_MEDIA_URL_4, title="One", publish_date="2024-02-01"),
    ]


@pytest.mark.unit
class TestSelectItems(unittest.TestCase):
    """Test select_items precedence and edge cases."""

    def setUp(self):
        self.items = _feed_items()

    def _titles(self, **selection):
        chosen = feed_selector.select_items(
            self.items, config.FeedSelection(**selection), today=date(2024, 3, 16)
        )
        return [item.title for item in chosen]

    def test_default_is_whole_feed_newest_first(self):
        self.assertEqual(self._titles(), ["Four", "Three", "Two", "One"])

    def test_last_takes_first_k_in_feed_order(self):
        self.assertEqual(self._titles(last=2), ["Four", "Three"])

    def test_last_larger_than_feed(self):
        self.assertEqual(len(self._titles(last=10)), 4)

    def test_oldest_with_skip(self):
        """oldest reverses the feed; skip then drops the first s items."""
        self.assertEqual(self._titles(order="oldest", skip=1), ["Two", "Three", "Four"])

    def test_newest_with_skip(self):
        self.assertEqual(self._titles(order="newest", skip=3), ["One"])

    def test_explicit_items(self):
        self.assertEqual(self._titles(items=[TEST_MEDIA_URL_3, TEST_MEDIA_URL]), ["Four", "Two"])

    def test_explicit_item_not_in_feed(self):
        with self.assertRaises(NoMatchingItemsError):
            self._titles(items=["https://example.com/missing.mp3"])

    def test_last_days(self):
        self.assertEqual(self._titles(last_days=7), ["Four", "Three"])

    def test_last_days_with_no_match(self):
        with self.assertRaises(NoMatchingItemsError):
            feed_selector.select_items(
                self.items, config.FeedSelection(last_days=1), today=date(2025, 1, 1)
            )

    def test_dates(self):
        self.assertEqual(self._titles(dates=["2024-03-01", "2024-02-01"]), ["Two", "One"])

    def test_dates_with_no_match(self):
        with self.assertRaises(NoMatchingItemsError):
            self._titles(dates=["1999-01-01"])


@pytest.mark.unit
class TestFeedSelectionValidation(unittest.TestCase):
    """Conflicting selection parameters are rejected before any fetch."""

    def test_last_excludes_order_and_skip(self):
        with self.assertRaises(InvalidSelectionError):
            config.FeedSelection(last=2, order="oldest")
        with self.assertRaises(InvalidSelectionError):
            config.FeedSelection(last=2, skip=1)

    def test_items_exclude_everything_else(self):
        for extra in ({"order": "newest"}, {"skip": 0}, {"last": 1}, {"dates": ["2024-01-01"]}):
            with self.subTest(extra=extra):
                with self.assertRaises(InvalidSelectionError):
                    config.FeedSelection(items=[TEST_MEDIA_URL], **extra)

    def test_out_of_range_values(self):
        with self.assertRaises(InvalidSelectionError):
            config.FeedSelection(skip=-1)
        with self.assertRaises(InvalidSelectionError):
            config.FeedSelection(last=0)

    def test_bad_date_format(self):
        with self.assertRaises(InvalidSelectionError):
            config.FeedSelection(dates=["03/15/2024"])


@pytest.mark.unit
class TestFetchFeed(unittest.TestCase):
    """Test fetch_feed error translation."""

    @patch("shownotes.feed_selector.downloader.http_get")
    def test_success_sends_accept_header(self, mock_get):
        mock_get.return_value = Mock(content=b"<rss/>")
        content = feed_selector.fetch_feed(TEST_FEED_URL, "agent", 10)
        self.assertEqual(content, b"<rss/>")
        args, kwargs = mock_get.call_args
        self.assertEqual(args, (TEST_FEED_URL, "agent", 10))
        self.assertEqual(kwargs["headers"], {"Accept": "application/rss+xml"})

    @patch("shownotes.feed_selector.downloader.http_get")
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.Timeout("slow")
        with self.assertRaises(FeedFetchTimeoutError):
            feed_selector.fetch_feed(TEST_FEED_URL)

    @patch("shownotes.feed_selector.downloader.http_get")
    def test_http_error(self, mock_get):
        response = Mock(status_code=404)
        mock_get.side_effect = requests.HTTPError("not found", response=response)
        with self.assertRaises(FeedFetchError) as ctx:
            feed_selector.fetch_feed(TEST_FEED_URL)
        self.assertIn("404", str(ctx.exception))
        self.assertNotIsInstance(ctx.exception, FeedFetchTimeoutError)

    @patch("shownotes.feed_selector.downloader.http_get")
    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(FeedFetchError):
            feed_selector.fetch_feed(TEST_FEED_URL)


@pytest.mark.unit
class TestLoadFeed(unittest.TestCase):
    """Test load_feed."""

    @patch("shownotes.feed_selector.fetch_feed")
    def test_returns_media_items(self, mock_fetch):
        mock_fetch.return_value = build_rss_xml([{"title": "Ep", "url": TEST_MEDIA_URL}])
        channel, items = feed_selector.load_feed(TEST_FEED_URL)
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0].channel, channel.title)

    @patch("shownotes.feed_selector.fetch_feed")
    def test_no_media_items(self, mock_fetch):
        mock_fetch.return_value = build_rss_xml([{"title": "Text only"}])
        with self.assertRaises(NoMatchingItemsError):
            feed_selector.load_feed(TEST_FEED_URL)


@pytest.mark.unit
class TestWriteInfo(unittest.TestCase):
    """Test write_info."""

    def test_json_list_with_camel_case_keys(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "rss_info.json")
            feed_selector.write_info(_feed_items(), path)
            with open(path, encoding="utf-8") as handle:
                raw = handle.read()
        data = json.loads(raw)
        self.assertEqual(len(data), 4)
        self.assertEqual(data[0]["showLink"], TEST_MEDIA_URL)
        self.assertEqual(data[0]["publishDate"], "2024-03-15")
        self.assertIn('\n  {\n    "showLink"', raw)
