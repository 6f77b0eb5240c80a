# entity_assets/services/gallery_renumberer.py
"""
Gallery Renumberer

Keeps gallery indices dense (1..N) after a member is removed, preserving the
members' relative order.

Files are shifted in two phases so no intermediate state has two assets
sharing one name:

    1. {old name}   -> {final name}__tmp
    2. {final name}__tmp -> {final name}

Before phase 1 a journal listing every rename is written into the folder;
its phase is advanced once phase 1 is done and the journal is removed when
phase 2 completes. recover() finishes a run that was interrupted between
those points.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError

from ..constants import RENUMBER_JOURNAL_FILENAME
from ..enums import LogEmoji, LoggerName, LogSource, RenumberPhase
from ..exceptions import EntityAssetsError
from ..models.result_model import OperationResult, RenumberEntry, RenumberJournal
from ..utils.entity_locks import EntityLockRegistry
from ..utils.filename_utils import (
    GalleryFilename,
    parse_gallery_filename,
    temporary_name,
)
from ..utils.path_utils import join_relative
from .asset_repository import AssetRepository
from .logger import get_service_logger

logger = get_service_logger(LoggerName.GALLERY_RENUMBERER, LogSource.STORAGE)


class GalleryRenumberer:
    """Journaled two-phase renaming of gallery members."""

    def __init__(
        self,
        repository: AssetRepository,
        locks: Optional[EntityLockRegistry] = None,
    ):
        self.repository = repository
        self.locks = locks or EntityLockRegistry()

    def plan(self, folder: str) -> List[RenumberEntry]:
        """
        Compute the renames that make a folder's gallery dense again.

        Members are grouped by (prefix, index) so every variant of one
        member moves together, and groups keep their numeric order. Files
        that already carry their final name are left out.
        """
        groups: Dict[Tuple[str, int], List[Tuple[str, GalleryFilename]]] = (
            defaultdict(list)
        )
        for name in self.repository.list_files(folder):
            parsed = parse_gallery_filename(name)
            if parsed is not None:
                groups[(parsed.prefix, parsed.index)].append((name, parsed))

        entries: List[RenumberEntry] = []
        for new_index, key in enumerate(sorted(groups), start=1):
            for name, parsed in groups[key]:
                final = parsed.with_index(new_index)
                if final != name:
                    entries.append(
                        RenumberEntry(
                            original=name,
                            temporary=temporary_name(final),
                            final=final,
                        )
                    )
        return entries

    def renumber(self, folder: str) -> OperationResult:
        """
        Reassign gallery indices 1..N in their current order.

        Best-effort: failed renames are collected in the result and the
        remaining ones are still attempted. The folder is removed if it
        ends up without files.

        Args:
            folder: Relative entity folder ({type}/{shard})
        """
        with self.locks.lock(folder):
            result = self.recover(folder) or OperationResult()
            if self.repository.exists(self._journal_path(folder)):
                # an unfinished run still owns the temporary names
                return result

            entries = self.plan(folder)
            if entries:
                journal = RenumberJournal(folder=folder, entries=entries)
                self._write_journal(journal)
                result.merge(self._apply(journal))

                logger.info(
                    f"Renumbered {len(entries)} gallery files in {folder}",
                    emoji=LogEmoji.UPDATE,
                    extra_context={"failed_paths": result.failed_paths},
                )

            self.repository.prune_dir(folder)
            return result

    def recover(self, folder: str) -> Optional[OperationResult]:
        """
        Finish a renumbering interrupted by a crash.

        Returns:
            Result of the resumed run, or None if nothing was pending

        Raises:
            EntityAssetsError: If the journal exists but cannot be parsed
        """
        with self.locks.lock(folder):
            journal = self._read_journal(folder)
            if journal is None:
                return None

            logger.warning(
                f"Resuming interrupted gallery renumbering in {folder}",
                emoji=LogEmoji.RESTORE,
                extra_context={"phase": int(journal.phase)},
            )
            result = self._apply(journal)
            self.repository.prune_dir(folder)
            return result

    # ============================================================================
    # PHASES
    # ============================================================================

    def _apply(self, journal: RenumberJournal) -> OperationResult:
        result = OperationResult()

        if journal.phase == RenumberPhase.TO_TEMPORARY:
            result.merge(self._to_temporary(journal))
            journal.phase = RenumberPhase.TO_FINAL
            self._write_journal(journal)

        phase_two = self._to_final(journal)
        result.merge(phase_two)

        if phase_two.success:
            self.repository.delete_file(self._journal_path(journal.folder))
        else:
            logger.warning(
                f"Renumbering journal kept in {journal.folder} for a later retry",
                extra_context={"failed_paths": phase_two.failed_paths},
            )
        return result

    def _to_temporary(self, journal: RenumberJournal) -> OperationResult:
        result = OperationResult()
        for entry in journal.entries:
            source = join_relative(journal.folder, entry.original)
            temporary = join_relative(journal.folder, entry.temporary)

            if self.repository.exists(temporary):
                continue
            if not self.repository.exists(source):
                logger.warning(
                    f"Gallery file vanished before renumbering: {source}",
                    emoji=LogEmoji.SEARCH,
                )
                result.record(source, False)
                continue

            result.record(source, self.repository.rename(source, temporary))
        return result

    def _to_final(self, journal: RenumberJournal) -> OperationResult:
        result = OperationResult()
        for entry in journal.entries:
            temporary = join_relative(journal.folder, entry.temporary)
            final = join_relative(journal.folder, entry.final)

            if not self.repository.exists(temporary):
                continue
            # a file still sitting at a final name is one that never left
            # phase 1; replacing it would lose an asset
            if self.repository.exists(final):
                logger.error(
                    f"Cannot rename {temporary}: {final} is occupied",
                    error_context={"operation": "renumber"},
                )
                result.record(temporary, False)
                continue

            result.record(final, self.repository.rename(temporary, final))
        return result

    # ============================================================================
    # JOURNAL
    # ============================================================================

    @staticmethod
    def _journal_path(folder: str) -> str:
        return join_relative(folder, RENUMBER_JOURNAL_FILENAME)

    def _write_journal(self, journal: RenumberJournal) -> None:
        self.repository.write_text(
            self._journal_path(journal.folder), journal.model_dump_json(indent=2)
        )

    def _read_journal(self, folder: str) -> Optional[RenumberJournal]:
        path = self._journal_path(folder)
        text = self.repository.read_text(path)
        if text is None:
            return None

        try:
            journal = RenumberJournal.model_validate_json(text)
        except ValidationError as e:
            raise EntityAssetsError(
                f"Corrupt renumbering journal: {path}", path=path
            ) from e

        # the journal is authoritative for names, the caller for location
        journal.folder = folder
        return journal
