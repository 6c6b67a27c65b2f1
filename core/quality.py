"""
Asset Quality Inspection

Scans the full collection and reports data-quality violations.
Rules are evaluated independently, so one asset can raise several issues:

- MISSING_COORDINATES: latitude or longitude absent
- MISSING_FIELDS: name, region, type or status empty
- DUPLICATE_POINT: two or more assets at exactly the same coordinates

Issues are reported, never enforced.
"""

from __future__ import annotations

from typing import Iterable

from core.models import Asset, QaCode, QaIssue, REQUIRED_ASSET_FIELDS


MISSING_COORDINATES_MESSAGE = "Latitude/Longitude is missing."


class QualityInspector:
    """
    Runs QA rules over an asset snapshot.

    Per-asset issues come first in collection order, followed by
    duplicate-point issues group by group.
    """

    def inspect(self, assets: Iterable[Asset]) -> list[QaIssue]:
        """
        Inspect assets for rule violations.

        Args:
            assets: Full, unfiltered collection snapshot

        Returns:
            List of QaIssue, possibly empty
        """
        issues: list[QaIssue] = []
        # Exact coordinate pair -> member ids, in collection order
        point_groups: dict[tuple[float, float], list[str]] = {}

        for asset in assets:
            if asset.has_coordinates:
                key = (float(asset.latitude), float(asset.longitude))
                point_groups.setdefault(key, []).append(asset.id)
            else:
                issues.append(QaIssue(
                    code=QaCode.MISSING_COORDINATES,
                    asset_id=asset.id,
                    message=MISSING_COORDINATES_MESSAGE,
                ))

            missing = self._missing_fields(asset)
            if missing:
                issues.append(QaIssue(
                    code=QaCode.MISSING_FIELDS,
                    asset_id=asset.id,
                    message=f"One or more required fields are empty: {', '.join(missing)}.",
                ))

        issues.extend(self._duplicate_point_issues(point_groups))
        return issues

    @staticmethod
    def _missing_fields(asset: Asset) -> list[str]:
        return [name for name in REQUIRED_ASSET_FIELDS if not getattr(asset, name)]

    @staticmethod
    def _duplicate_point_issues(
        point_groups: dict[tuple[float, float], list[str]],
    ) -> list[QaIssue]:
        issues = []
        for ids in point_groups.values():
            if len(ids) < 2:
                continue
            for asset_id in ids:
                others = ", ".join(other for other in ids if other != asset_id)
                issues.append(QaIssue(
                    code=QaCode.DUPLICATE_POINT,
                    asset_id=asset_id,
                    message=f"Shares coordinates with assets: {others}.",
                ))
        return issues


def inspect_assets(assets: Iterable[Asset]) -> list[QaIssue]:
    """Run every QA rule over the given assets."""
    return QualityInspector().inspect(assets)


def count_by_code(issues: Iterable[QaIssue]) -> dict[str, int]:
    """Count issues per QA code. Every code is present, zero if unseen."""
    counts = {code.value: 0 for code in QaCode}
    for issue in issues:
        counts[issue.code.value] += 1
    return counts
