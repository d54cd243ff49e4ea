from typing import Iterable, List, Optional, Sequence, Set, Tuple


from app.collections.base import ImageRef
from app.collections.car_models import CarImage
from app.database.blob_storage import StoredBlob
from app.utils.exception_utils import EmptyImageSetException


def image_matches(image: CarImage, identifiers: Set[str]) -> bool:
    """
    Check whether an image is referenced by any identifier (id, blob name or URL).

    Args:
        image: Image to test
        identifiers: Requested identifiers

    Returns:
        True if the image is referenced
    """
    return (
        image.id in identifiers
        or image.filename in identifiers
        or image.url in identifiers
    )


def count_surviving(current_images: Sequence[CarImage], deletion_requests: Iterable[str]) -> int:
    """Return how many images remain after applying the deletion requests."""
    identifiers = set(deletion_requests or ())
    return sum(1 for img in current_images if not image_matches(img, identifiers))


def reconcile_images(
    current_images: Sequence[CarImage],
    deletion_requests: Iterable[str],
    new_uploads: Sequence[StoredBlob],
    primary_index: Optional[int] = None,
    alt_text: str = "",
) -> Tuple[List[CarImage], List[CarImage]]:
    """
    Compute the next image set of a listing.

    Survivors keep their order and new uploads are appended after them. The primary
    image is the one at ``primary_index`` (index into the resulting list) when it is in
    range, else the surviving primary, else the first image. Exactly one image is primary
    in the result. Inputs are never mutated and no I/O is performed; the caller deletes
    the blobs of the returned removed images.

    Args:
        current_images: Images currently stored on the listing
        deletion_requests: Image ids, blob names or URLs to remove; unknown ones are ignored
        new_uploads: Blobs already written for this request, in submission order
        primary_index: Optional index of the image to mark primary
        alt_text: Alternative text given to the new images

    Returns:
        Tuple of (next images, removed images)
    """
    identifiers = set(deletion_requests or ())

    survivors: List[CarImage] = []
    removed: List[CarImage] = []
    for image in current_images:
        if image_matches(image, identifiers):
            removed.append(image.model_copy())
        else:
            survivors.append(image.model_copy())

    appended = [
        CarImage(
            url=blob.reference,
            filename=blob.stored_name,
            alt_text=alt_text,
            is_primary=False,
            size_bytes=blob.size_bytes,
            mime_type=blob.content_type,
        )
        for blob in new_uploads
    ]
    images = survivors + appended

    if not images:
        raise EmptyImageSetException()

    if primary_index is not None and 0 <= primary_index < len(images):
        chosen = primary_index
    else:
        flagged = [idx for idx, img in enumerate(survivors) if img.is_primary]
        # zero or several flagged survivors fall back to the first image
        chosen = flagged[0] if len(flagged) == 1 else 0

    for idx, image in enumerate(images):
        image.is_primary = idx == chosen

    return images, removed


def thumbnail_for(images: Sequence[CarImage]) -> ImageRef:
    """
    Derive the thumbnail snapshot from the primary image.

    Args:
        images: Reconciled images

    Returns:
        ImageRef of the primary image, or an empty ImageRef when there are no images
    """
    primary = next((img for img in images if img.is_primary), None)
    if primary is None and images:
        primary = images[0]
    if primary is None:
        return ImageRef()
    return ImageRef(url=primary.url, filename=primary.filename)
