"""
Read-modify-write cycle over the remote reviews file.

draw_next(): fetch -> parse -> (empty: done) | select -> serialize -> put(expected sha)

There is no in-process lock. Two concurrent draws may fetch the same version;
the store accepts only the first put for that version and the other one gets
ConflictError, which is propagated as-is (never retried with stale data).
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from review_picker.errors import ConflictError, MalformedDataError
from review_picker.github_client import BlobStore
from review_picker.selection import IndexPicker, random_index, select_and_remove
from review_picker.settings import Settings

logger = logging.getLogger(__name__)

NO_REVIEWS_MESSAGE = "No reviews left in file."


@dataclass(frozen=True)
class DrawResult:
    done: bool
    review: Any = None
    remaining: int = 0
    message: Optional[str] = None


def parse_reviews(content: str) -> List[Any]:
    """
    Extract the reviews array from the file content.

    Invalid JSON raises MalformedDataError. A valid document without a
    'reviews' list (missing field, wrong type, non-object root) counts as empty.
    """
    try:
        document = json.loads(content)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedDataError(f"Invalid JSON in reviews file: {e}") from e
    if not isinstance(document, dict):
        return []
    reviews = document.get("reviews")
    if not isinstance(reviews, list):
        return []
    return reviews


def serialize_reviews(reviews: List[Any]) -> str:
    return json.dumps({"reviews": reviews}, indent=2, ensure_ascii=False) + "\n"


class ReviewDrawer:
    """Draws reviews from the configured file, one commit per draw."""

    def __init__(self, store: BlobStore, settings: Settings, pick_index: Optional[IndexPicker] = None):
        self.store = store
        self.settings = settings
        self.pick_index = pick_index or random_index

    async def draw_next(self) -> DrawResult:
        path, ref = self.settings.file_path, self.settings.github_branch

        blob = await self.store.fetch(path, ref)
        reviews = parse_reviews(blob.content)

        if not reviews:
            logger.info("No reviews left in %s@%s", path, ref)
            return DrawResult(done=True, review=None, remaining=0, message=NO_REVIEWS_MESSAGE)

        selection = select_and_remove(reviews, self.pick_index)

        try:
            await self.store.put(
                path,
                serialize_reviews(selection.residual),
                blob.version,
                ref,
                self.settings.commit_message_for_path,
            )
        except ConflictError:
            logger.warning(
                "Lost draw race on %s@%s (version %s changed before write)",
                path, ref, blob.version,
            )
            raise

        logger.info(f"Drew review from {path}@{ref}; {len(selection.residual)} remaining")
        return DrawResult(done=False, review=selection.chosen, remaining=len(selection.residual))

    async def get_count(self) -> int:
        """Number of reviews currently in the file. Read-only."""
        blob = await self.store.fetch(self.settings.file_path, self.settings.github_branch)
        return len(parse_reviews(blob.content))
