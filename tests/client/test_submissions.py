"""
Unit tests for submission request construction.
"""

import xml.etree.ElementTree as ElementTree

import pytest

from musicbrainz_client.runtime.errors import ConfigurationError
from musicbrainz_client.submissions import (
    MAX_COLLECTION_ITEMS,
    MMD_NAMESPACE,
    RatingSubmission,
    TagSubmission,
    TagVote,
    collection_request,
)

from helpers import ARTIST_ID, COLLECTION_ID, RELEASE_ID

NS = {"mb": MMD_NAMESPACE}


class TestRatingSubmission:
    """Tests for RatingSubmission."""

    def test_request(self):
        """Test the request is an authenticated XML POST to /ws/2/rating."""
        request = RatingSubmission("app-1.0").add("artist", ARTIST_ID, 80).to_request()
        assert request.method == "POST"
        assert request.path == "/ws/2/rating"
        assert request.params == (("client", "app-1.0"),)
        assert request.content_type == "application/xml"
        assert request.authenticated

    def test_body(self):
        """Test ratings are grouped per entity type."""
        submission = (RatingSubmission("app")
                      .add("artist", ARTIST_ID, 80)
                      .add("release-group", RELEASE_ID, 20))
        root = ElementTree.fromstring(submission.request_body())
        assert root.tag == f"{{{MMD_NAMESPACE}}}metadata"
        artist = root.find("mb:artist-list/mb:artist", NS)
        assert artist.get("id") == ARTIST_ID
        assert artist.find("mb:user-rating", NS).text == "80"
        assert root.find("mb:release-group-list/mb:release-group/mb:user-rating", NS).text == "20"
        assert len(submission) == 2

    @pytest.mark.parametrize("rating", [-1, 101, 5.5, True])
    def test_invalid_rating(self, rating):
        with pytest.raises(ConfigurationError):
            RatingSubmission("app").add("artist", ARTIST_ID, rating)

    def test_unrateable_entity(self):
        with pytest.raises(ConfigurationError):
            RatingSubmission("app").add("release", RELEASE_ID, 60)

    def test_blank_client(self):
        """Test a blank client ID is rejected up front."""
        with pytest.raises(ConfigurationError) as exc_info:
            RatingSubmission("  ")
        assert exc_info.value.message == "The client ID must not be blank."

    def test_empty_submission(self):
        with pytest.raises(ConfigurationError):
            RatingSubmission("app").to_request()


class TestTagSubmission:
    """Tests for TagSubmission."""

    def test_body_with_votes(self):
        """Test each tag carries its vote."""
        submission = (TagSubmission("app")
                      .add("artist", ARTIST_ID, ["rock", "british"])
                      .add("artist", ARTIST_ID, "pop", TagVote.DOWNVOTE))
        root = ElementTree.fromstring(submission.request_body())
        tags = root.findall("mb:artist-list/mb:artist/mb:user-tag-list/mb:user-tag", NS)
        votes = {tag.find("mb:name", NS).text: tag.get("vote") for tag in tags}
        assert votes == {"rock": "upvote", "british": "upvote", "pop": "downvote"}
        assert submission.to_request().path == "/ws/2/tag"

    def test_blank_tag(self):
        with pytest.raises(ConfigurationError):
            TagSubmission("app").add("artist", ARTIST_ID, [""])


class TestCollectionRequest:
    """Tests for collection edits."""

    def test_add(self):
        request = collection_request("PUT", "app", COLLECTION_ID, "release", [RELEASE_ID, ARTIST_ID])
        assert request.method == "PUT"
        assert request.path == f"/ws/2/collection/{COLLECTION_ID}/releases/{RELEASE_ID};{ARTIST_ID}"
        assert request.params == (("client", "app"),)
        assert request.authenticated
        assert request.body is None

    def test_remove_series(self):
        request = collection_request("DELETE", "app", COLLECTION_ID, "series", [RELEASE_ID])
        assert request.path.endswith(f"/series/{RELEASE_ID}")

    def test_empty(self):
        with pytest.raises(ConfigurationError):
            collection_request("PUT", "app", COLLECTION_ID, "release", [])

    def test_too_many(self):
        with pytest.raises(ConfigurationError):
            collection_request("PUT", "app", COLLECTION_ID, "release", [RELEASE_ID] * (MAX_COLLECTION_ITEMS + 1))

    def test_unknown_entity(self):
        with pytest.raises(ConfigurationError):
            collection_request("PUT", "app", COLLECTION_ID, "genre", [RELEASE_ID])
