#!/usr/bin/env python3
"""Tests for RSS feed parsing."""

import unittest

import pytest

from conftest import (
    build_rss_xml,
    TEST_FEED_IMAGE,
    TEST_FEED_LINK,
    TEST_FEED_TITLE,
    TEST_MEDIA_URL,
    TEST_MEDIA_URL_2,
    TEST_MEDIA_URL_3,
)
from shownotes import rss_parser
from shownotes.exceptions import FeedFetchError


@pytest.mark.unit
class TestParseFeed(unittest.TestCase):
    """Test parse_feed."""

    def setUp(self):
        self.xml = build_rss_xml(
            [
                {
                    "title": "Newest",
                    "url": TEST_MEDIA_URL,
                    "pubDate": "Fri, 15 Mar 2024 10:00:00 +0000",
                    "image": "https://example.com/ep1.jpg",
                },
                {
                    "title": "Show notes page",
                    "url": "https://example.com/ep.html",
                    "type": "text/html",
                },
                {"title": "No enclosure"},
                {
                    "title": "Video",
                    "url": TEST_MEDIA_URL_2,
                    "type": "video/mp4",
                    "pubDate": "Thu, 14 Mar 2024 10:00:00 +0000",
                },
            ]
        )

    def test_channel_fields(self):
        channel, _ = rss_parser.parse_feed(self.xml)
        self.assertEqual(channel.title, TEST_FEED_TITLE)
        self.assertEqual(channel.link, TEST_FEED_LINK)
        self.assertEqual(channel.image, TEST_FEED_IMAGE)

    def test_only_audio_and_video_enclosures(self):
        """Items without a media enclosure are dropped, feed order is kept."""
        _, items = rss_parser.parse_feed(self.xml)
        self.assertEqual([item.show_link for item in items], [TEST_MEDIA_URL, TEST_MEDIA_URL_2])
        self.assertEqual(items[1].enclosure_type, "video/mp4")

    def test_item_fields(self):
        _, items = rss_parser.parse_feed(self.xml)
        first = items[0]
        self.assertEqual(first.title, "Newest")
        self.assertEqual(first.channel, TEST_FEED_TITLE)
        self.assertEqual(first.channel_url, TEST_FEED_LINK)
        self.assertEqual(first.publish_date, "2024-03-15")
        self.assertEqual(first.cover_image, "https://example.com/ep1.jpg")

    def test_cover_image_falls_back_to_channel(self):
        _, items = rss_parser.parse_feed(self.xml)
        self.assertEqual(items[1].cover_image, TEST_FEED_IMAGE)

    def test_malformed_xml(self):
        with self.assertRaises(FeedFetchError):
            rss_parser.parse_feed(b"<rss><channel><title>oops</channel>")

    def test_missing_channel(self):
        with self.assertRaises(FeedFetchError):
            rss_parser.parse_feed(b"<rss version='2.0'></rss>")

    def test_empty_feed_parses(self):
        xml = build_rss_xml([{"title": "x", "url": TEST_MEDIA_URL_3, "type": "text/plain"}])
        _, items = rss_parser.parse_feed(xml)
        self.assertEqual(items, [])


@pytest.mark.unit
class TestParsePublishDate(unittest.TestCase):
    """Test parse_publish_date."""

    def test_rfc2822(self):
        self.assertEqual(
            rss_parser.parse_publish_date("Mon, 01 Jan 2024 08:00:00 GMT"), "2024-01-01"
        )

    def test_converted_to_utc(self):
        """Offsets are normalized to UTC before taking the date."""
        self.assertEqual(
            rss_parser.parse_publish_date("Fri, 15 Mar 2024 23:30:00 -0500"), "2024-03-16"
        )

    def test_unparseable(self):
        self.assertEqual(rss_parser.parse_publish_date("yesterday"), "")
        self.assertEqual(rss_parser.parse_publish_date(""), "")
