"""Render ``package.json`` and ``tsconfig.json`` for the generated output.

The generated directory is a ready-to-build TypeScript package: ``axios``
is a runtime dependency of ``sdk.ts``, ``react`` a peer dependency of
``hooks.ts``.
"""

from __future__ import annotations

import json
import re
from typing import Any, Sequence

from specsdk.models import EndpointDescriptor, GenerationOptions, SpecDocument

_DEFAULT_PACKAGE_NAME = "api-sdk"


def package_name(documents: Sequence[SpecDocument]) -> str:
    """npm package name derived from the first document's title.

    Example::

        >>> package_name([SpecDocument(title="Pet Store API")])
        'pet-store-api-sdk'
    """
    if not documents:
        return _DEFAULT_PACKAGE_NAME
    slug = re.sub(r"[^a-z0-9]+", "-", documents[0].title.lower()).strip("-")
    return f"{slug}-sdk" if slug else _DEFAULT_PACKAGE_NAME


def _semver(version: str) -> str:
    return version if re.match(r"^\d+\.\d+\.\d+", version) else "0.0.0"


def render_package_json(
    documents: Sequence[SpecDocument],
    endpoints: Sequence[EndpointDescriptor],
    options: GenerationOptions,
) -> str:
    data: dict[str, Any] = {
        "name": package_name(documents),
        "version": _semver(documents[0].version) if documents else "0.0.0",
        "private": True,
        "description": "; ".join(doc.title for doc in documents) or "Generated API client",
        "main": "sdk.ts",
        "types": "sdk.ts",
        "scripts": {"build": "tsc"},
        "dependencies": {"axios": "^1.6.0"},
        "peerDependencies": {"react": ">=17"},
        "devDependencies": {"@types/react": "^18.2.0", "typescript": "^5.3.0"},
    }
    return json.dumps(data, indent=2) + "\n"


def render_tsconfig(
    documents: Sequence[SpecDocument],
    endpoints: Sequence[EndpointDescriptor],
    options: GenerationOptions,
) -> str:
    data = {
        "compilerOptions": {
            "target": "ES2020",
            "module": "ESNext",
            "moduleResolution": "node",
            "lib": ["ES2020", "DOM"],
            "jsx": "react",
            "strict": True,
            "esModuleInterop": True,
            "skipLibCheck": True,
            "declaration": True,
            "outDir": "dist",
        },
        "include": ["sdk.ts", "hooks.ts"],
    }
    return json.dumps(data, indent=2) + "\n"
