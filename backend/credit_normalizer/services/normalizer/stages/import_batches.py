"""
Import batches stage.

One batch per source system the adapter found, each carrying the captured
artifact, plus a composite batch for site-level data (scores, subject name).
"""
from __future__ import annotations
import logging

from ....models.credit_file import AcquisitionMethod, ImportBatch, RawArtifact
from ..context import COMPOSITE_BATCH_KEY, NormalizationContext
from ..ids import generate_id
from ..mappers.source_system import map_source_system

logger = logging.getLogger(__name__)

SOURCE_WRAPPER_NAMES = {
    "checkmyfile": "CheckMyFile",
    "equifax-pdf": "Equifax",
}


def build_import_batches(ctx: NormalizationContext) -> None:
    metadata = ctx.metadata

    acquisition_method = AcquisitionMethod.PDF_UPLOAD if metadata.is_pdf else AcquisitionMethod.HTML_SCRAPE
    source_wrapper = SOURCE_WRAPPER_NAMES.get(metadata.adapter_id, metadata.adapter_id)
    mapping_version = f"{metadata.adapter_id}-{metadata.adapter_version}"

    for system_name in metadata.source_systems_found:
        source_system = map_source_system(system_name)
        import_id = generate_id("imp", source_system.value, metadata.extracted_at, metadata.adapter_id)

        ctx.import_batches[source_system.value] = ImportBatch(
            import_id=import_id,
            imported_at=metadata.extracted_at,
            source_system=source_system,
            acquisition_method=acquisition_method,
            source_wrapper=source_wrapper,
            mapping_version=mapping_version,
            raw_artifacts=[RawArtifact(
                artifact_id=generate_id("artifact", metadata.content_hash),
                artifact_type=metadata.artifact_type,
                sha256=metadata.content_hash,
                uri=metadata.source_uri or None,
            )],
        )

    ctx.import_batches[COMPOSITE_BATCH_KEY] = ImportBatch(
        import_id=generate_id("imp", COMPOSITE_BATCH_KEY, metadata.extracted_at, metadata.adapter_id),
        imported_at=metadata.extracted_at,
        source_system=map_source_system(None),
        acquisition_method=acquisition_method,
        source_wrapper=source_wrapper,
        mapping_version=mapping_version,
    )

    logger.debug(f"Built {len(ctx.import_batches)} import batches")
