"""Taste twin ("Music Doppelganger") discovery among followed accounts"""
import logging
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Sequence

from wrapped_insights.config import DoppelgangerConfig
from wrapped_insights.genres import normalize_genre, track_genres
from wrapped_insights.models.snapshot import FollowedAccountSnapshot, Track
from wrapped_insights.models.summary import DoppelgangerMatch, DoppelgangerResult, NoMatchReason

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TasteProfile:
    """Track ids, lower-cased artist names and genre keys of one account"""
    track_ids: FrozenSet[str]
    artists: FrozenSet[str]
    genres: FrozenSet[str]

    @classmethod
    def from_tracks(cls, tracks: Sequence[Track]) -> "TasteProfile":
        genres = set()
        for track in tracks:
            genres |= track_genres(track)
        return cls(
            track_ids=frozenset(t.track_id for t in tracks if t.track_id),
            artists=frozenset(t.artist.name.strip().lower() for t in tracks if t.artist.name and t.artist.name.strip()),
            genres=frozenset(genres)
        )

    @classmethod
    def from_following(cls, account: FollowedAccountSnapshot) -> "TasteProfile":
        genres = {normalize_genre(g) for g in account.genres}
        return cls(
            track_ids=frozenset(account.track_ids),
            artists=frozenset(a.strip().lower() for a in account.artist_names if a and a.strip()),
            genres=frozenset(g for g in genres if g)
        )

    def is_empty(self) -> bool:
        return not (self.track_ids or self.artists or self.genres)


@dataclass(frozen=True)
class Candidate:
    account: FollowedAccountSnapshot
    shared_tracks: int
    shared_artists: int
    shared_genres: int
    similarity: float


class DoppelgangerMatcher:
    """Finds the followed account whose taste overlaps the user's the most"""

    def __init__(self, config: Optional[DoppelgangerConfig] = None):
        self.config = config or DoppelgangerConfig()

    def similarity(self, user: TasteProfile, shared_tracks: int, shared_artists: int, shared_genres: int) -> float:
        """
        Weighted blend of per-dimension overlap scores, in [0, 1).

        Each dimension scores shared / (shared + half_saturation), so a few
        shared tracks outweigh many shared genres under the default weights.
        Dimensions where the user has no data are left out of the blend.
        """
        c = self.config
        dimensions = (
            (user.track_ids, c.track_weight, shared_tracks, c.track_half_saturation),
            (user.artists, c.artist_weight, shared_artists, c.artist_half_saturation),
            (user.genres, c.genre_weight, shared_genres, c.genre_half_saturation),
        )
        weighted = 0.0
        weights = 0.0
        for user_items, weight, shared, half in dimensions:
            if not user_items or weight <= 0:
                continue
            weighted += weight * (shared / (shared + half))
            weights += weight
        if weights == 0:
            return 0.0
        return min(1.0, max(0.0, weighted / weights))

    def qualifies(self, shared_tracks: int, shared_artists: int) -> bool:
        """Minimum overlap floor; one coincidental genre never qualifies"""
        return (shared_tracks >= self.config.min_shared_tracks
                or shared_artists >= self.config.min_shared_artists)

    def compare(self, user: TasteProfile, account: FollowedAccountSnapshot) -> Candidate:
        other = TasteProfile.from_following(account)
        shared_tracks = len(user.track_ids & other.track_ids)
        shared_artists = len(user.artists & other.artists)
        shared_genres = len(user.genres & other.genres)
        return Candidate(
            account=account,
            shared_tracks=shared_tracks,
            shared_artists=shared_artists,
            shared_genres=shared_genres,
            similarity=self.similarity(user, shared_tracks, shared_artists, shared_genres)
        )

    def find(self, tracks: Sequence[Track], followings: Sequence[FollowedAccountSnapshot]) -> DoppelgangerResult:
        """
        Pick the best qualifying followed account.

        Ranking: highest similarity, then most shared tracks, then account id.
        Absence of a match is reported with a reason, never raised.
        """
        user = TasteProfile.from_tracks(tracks)
        if user.is_empty():
            return DoppelgangerResult(found=False, reason=NoMatchReason.NO_USER_DATA)
        if not followings:
            return DoppelgangerResult(found=False, reason=NoMatchReason.NO_FOLLOWED_ACCOUNTS)

        candidates: List[Candidate] = []
        for account in followings:
            candidate = self.compare(user, account)
            if self.qualifies(candidate.shared_tracks, candidate.shared_artists):
                candidates.append(candidate)
            else:
                logger.debug(f"Account {account.account_id} below overlap floor "
                             f"(tracks={candidate.shared_tracks}, artists={candidate.shared_artists})")

        if not candidates:
            return DoppelgangerResult(found=False, reason=NoMatchReason.NO_QUALIFYING_OVERLAP,
                                      total_compared=len(followings))

        best = min(candidates, key=lambda c: (-c.similarity, -c.shared_tracks, c.account.account_id))
        similarity = round(best.similarity, 4)
        logger.debug(f"Doppelganger: {best.account.account_id} at {similarity} among {len(candidates)} candidates")
        return DoppelgangerResult(
            found=True,
            total_compared=len(followings),
            match=DoppelgangerMatch(
                account_id=best.account.account_id,
                display_name=best.account.display_name,
                avatar_url=best.account.avatar_url,
                similarity=similarity,
                similarity_percentage=round(similarity * 100),
                shared_tracks=best.shared_tracks,
                shared_artists=best.shared_artists,
                shared_genres=best.shared_genres
            )
        )
