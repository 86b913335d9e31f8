from tiktok_proxy.services.format import (
    build_video_info,
    download_urls,
    extract_hashtags,
    format_bitrate,
    format_duration,
    format_file_size,
    format_resolution,
    format_sample_rate,
    format_upload_date,
)

URL = "https://www.tiktok.com/@user/video/123?lang=en"


def _no_nulls(value):
    if isinstance(value, dict):
        return all(_no_nulls(v) for v in value.values())
    if isinstance(value, list):
        return all(_no_nulls(v) for v in value)
    return value is not None


class TestDuration:
    def test_missing_or_zero(self):
        assert format_duration(None) == "00:00"
        assert format_duration(0) == "00:00"

    def test_minutes_and_padded_seconds(self):
        assert format_duration(65) == "1:05"
        assert format_duration(600) == "10:00"

    def test_fractional_seconds_are_floored(self):
        assert format_duration(59.9) == "0:59"


class TestSizes:
    def test_megabytes_two_decimals(self):
        assert format_file_size(1024 * 1024) == "1.00 MB"
        assert format_file_size(1536 * 1024) == "1.50 MB"

    def test_missing(self):
        assert format_file_size(None) == "N/A"
        assert format_file_size(0) == "N/A"

    def test_bitrate_rounds_half_up(self):
        assert format_bitrate(1234.5) == "1235 kbps"
        assert format_bitrate(2.5) == "3 kbps"
        assert format_bitrate(None) == "N/A"

    def test_sample_rate(self):
        assert format_sample_rate(44100) == "44.1 kHz"
        assert format_sample_rate(48000) == "48.0 kHz"
        assert format_sample_rate(None) == "44.1 kHz"


class TestHashtags:
    def test_order_of_appearance(self):
        assert extract_hashtags("Check this #fun #2024tok out") == ["fun", "2024tok"]

    def test_duplicates_are_kept(self):
        assert extract_hashtags("#a then #b then #a") == ["a", "b", "a"]

    def test_latin_letters(self):
        assert extract_hashtags("#café and #niño") == ["café", "niño"]

    def test_other_scripts_end_the_tag(self):
        assert extract_hashtags("#日本") == []
        assert extract_hashtags("#fyp日本") == ["fyp"]

    def test_empty(self):
        assert extract_hashtags(None) == []
        assert extract_hashtags("no tags here") == []


class TestUploadDate:
    def test_upload_date_wins_over_timestamp(self):
        assert format_upload_date("20240115", 1700000000) == "January 15, 2024"

    def test_timestamp_fallback(self):
        assert format_upload_date(None, 1700000000) == "November 14, 2023"

    def test_impossible_calendar_date_is_unknown(self):
        assert format_upload_date("20241340", 1700000000) == "Unknown"

    def test_wrong_shape_is_ignored(self):
        assert format_upload_date("2024-01-15", None) == "Unknown"

    def test_unknown(self):
        assert format_upload_date(None, None) == "Unknown"
        assert format_upload_date(None, 0) == "Unknown"


class TestResolution:
    def test_defaults_are_portrait(self):
        assert format_resolution(None, None) == "1080x1920"

    def test_each_dimension_defaults_independently(self):
        assert format_resolution(720, None) == "720x1920"
        assert format_resolution(720, 1280) == "720x1280"


def test_download_urls_encode_like_encode_uri_component():
    urls = download_urls(URL)
    encoded = "https%3A%2F%2Fwww.tiktok.com%2F%40user%2Fvideo%2F123%3Flang%3Den"
    assert urls["video_url"] == f"/api/tiktok/download/video?url={encoded}"
    assert urls["audio_url"] == f"/api/tiktok/download/audio?url={encoded}"


def test_build_video_info_from_empty_document():
    doc = build_video_info(URL, {}).model_dump(by_alias=True)

    assert _no_nulls(doc)
    assert doc["title"] == "TikTok Video"
    assert doc["description"] == "No description available"
    assert doc["thumbnail"] == "https://picsum.photos/seed/tiktok/1280/720"
    assert doc["videoId"] == "unknown"
    assert doc["uploadDate"] == "Unknown"
    assert doc["hashtags"] == []
    assert doc["metadata"] == {
        "duration": "00:00",
        "videoSize": "N/A",
        "audioSize": "N/A",
        "resolution": "1080x1920",
        "format": "MP4",
        "codec": "H.264",
        "fps": 30,
        "bitrate": "N/A",
        "width": 1080,
        "height": 1920,
        "audioCodec": "AAC",
        "audioChannels": 2,
        "audioSampleRate": "44.1 kHz",
    }
    assert doc["creator"] == {
        "username": "Unknown",
        "nickname": "TikTok User",
        "avatar": "",
        "verified": False,
    }
    assert doc["stats"] == {"views": 0, "likes": 0, "comments": 0, "shares": 0, "favorites": 0}
    assert doc["audio"] == {"title": "Original Sound", "author": "Unknown Artist"}


def test_build_video_info_from_full_document(sample_info):
    doc = build_video_info(URL, sample_info).model_dump(by_alias=True)

    assert doc["title"] == "Dance time"
    assert doc["description"] == "Check this #fun #2024tok out"
    assert doc["hashtags"] == ["fun", "2024tok"]
    assert doc["uploadDate"] == "January 15, 2024"
    assert doc["videoId"] == "7300000000000000000"
    assert doc["metadata"]["duration"] == "1:15"
    assert doc["metadata"]["videoSize"] == "5.00 MB"
    assert doc["metadata"]["audioSize"] == "0.60 MB"
    assert doc["metadata"]["resolution"] == "576x1024"
    assert doc["metadata"]["bitrate"] == "1235 kbps"
    assert doc["metadata"]["audioSampleRate"] == "48.0 kHz"
    assert doc["creator"]["username"] == "creator"
    assert doc["creator"]["avatar"] == "https://www.tiktok.com/@creator"
    assert doc["stats"] == {"views": 1000, "likes": 100, "comments": 10, "shares": 5, "favorites": 0}
    assert doc["audio"] == {"title": "original sound - creator", "author": "Creator Name"}


def test_title_and_description_borrow_from_each_other():
    only_description = build_video_info(URL, {"description": "just text #tag"})
    assert only_description.title == "just text #tag"
    assert only_description.hashtags == ["tag"]

    only_title = build_video_info(URL, {"title": "#title tag"})
    assert only_title.description == "#title tag"
    assert only_title.hashtags == ["title"]


def test_audio_size_prefers_reported_value():
    doc = build_video_info(URL, {"audio_filesize": 2 * 1024 * 1024, "filesize_approx": 100})
    assert doc.metadata.audio_size == "2.00 MB"
