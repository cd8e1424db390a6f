# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Image checker: alt text and lazy loading.

The first image on a page is treated as above-the-fold and is never
expected to be lazy-loaded.  It is still checked for alt text.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pageaudit import Finding, Severity
from pageaudit.document import Document, as_document

CATEGORY = "images"

MAX_LISTED = 5
SRC_PREVIEW = 50


@dataclass
class ImageFacts:
    total_images: int = 0
    images_with_alt: int = 0
    images_missing_alt: int = 0
    images_empty_alt: int = 0
    missing_alt_list: list[str] = field(default_factory=list)
    images_without_lazy: int = 0
    findings: list[Finding] = field(default_factory=list)

    @property
    def decorative_images(self) -> int:
        return self.images_empty_alt

    @property
    def lazy_eligible(self) -> int:
        return max(0, self.total_images - 1)


def check_images(source: Document | str | None) -> ImageFacts:
    doc = as_document(source)
    facts = ImageFacts()

    for idx, img in enumerate(doc.iter_tag("img")):
        facts.total_images += 1
        alt = img.get("alt")
        if alt is None:
            facts.images_missing_alt += 1
            if len(facts.missing_alt_list) < MAX_LISTED:
                src = img.get("src")
                facts.missing_alt_list.append(src[:SRC_PREVIEW] if src else "unknown")
        elif not alt.strip():
            facts.images_empty_alt += 1
        else:
            facts.images_with_alt += 1

        if idx > 0 and (img.get("loading") or "").strip().lower() != "lazy":
            facts.images_without_lazy += 1

    facts.findings = _findings(facts)
    return facts


def _findings(f: ImageFacts) -> list[Finding]:
    out: list[Finding] = []

    if f.images_without_lazy > 0 and f.total_images > 1:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.MEDIUM,
                issue="Images missing lazy loading",
                impact=f"{f.images_without_lazy} image(s) load eagerly, slowing initial page load",
                fix='Add loading="lazy" to offscreen images',
                time_estimate="2 minutes",
            )
        )

    if f.images_missing_alt > 0:
        if f.missing_alt_list:
            fix = "Add alt text to images:\n" + "\n".join(
                f'<img src="{src}" alt="Descriptive text">' for src in f.missing_alt_list
            )
        else:
            fix = 'Add alt="" for decorative images or descriptive alt text for meaningful images'
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.HIGH,
                issue=f"{f.images_missing_alt} image(s) missing alt text",
                impact="Alt text is critical for accessibility and SEO",
                fix=fix,
                time_estimate=f"{f.images_missing_alt * 2} minutes",
            )
        )

    return out
