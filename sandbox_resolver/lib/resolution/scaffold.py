"""Fixed files and baseline manifests injected into every preview sandbox."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field

TEMPLATE = "react-ts"

EXTERNAL_RESOURCES = [
    "https://cdn.tailwindcss.com",
    "https://fonts.googleapis.com/css2?family=Inter:ital,opsz,wght@0,14..32,100..900;1,14..32,100..900&display=swap",
]

TSCONFIG = json.dumps(
    {
        "include": ["./**/*"],
        "compilerOptions": {
            "strict": True,
            "esModuleInterop": True,
            "lib": ["dom", "es2015"],
            "jsx": "react-jsx",
            "baseUrl": "./",
            "paths": {"@/*": ["./*"]},
        },
    },
    indent=2,
)

UTILS = """import { clsx, type ClassValue } from 'clsx';
import { twMerge } from 'tailwind-merge';

export function cn(...inputs: ClassValue[]) {
  return twMerge(clsx(inputs));
}
"""

CONTENT = """export const content = `
# Hello, world

This is sample content for component previews. It includes **bold text**,
*italic text*, a [link](https://example.com) and a list:

- First item
- Second item
- Third item
`;
"""

SCAFFOLD_FILES: dict[str, str] = {
    "/tsconfig.json": TSCONFIG,
    "/lib/utils.ts": UTILS,
    "/lib/content.ts": CONTENT,
}

BASELINE_DEPENDENCIES: dict[str, str] = {
    # shadcn/ui global dependencies
    "@radix-ui/react-icons": "latest",
    "clsx": "latest",
    "tailwind-merge": "latest",
    "class-variance-authority": "latest",
    # Tailwind
    "tailwindcss": "latest",
    "tailwindcss-animate": "latest",
    # Common utilities
    "date-fns": "latest",
}

BASELINE_DEV_DEPENDENCIES: dict[str, str] = {
    "autoprefixer": "latest",
    "postcss": "latest",
}


@dataclass(frozen=True)
class Baseline:
    """Framework-level manifests every preview starts from."""

    dependencies: Mapping[str, str] = field(default_factory=lambda: dict(BASELINE_DEPENDENCIES))
    dev_dependencies: Mapping[str, str] = field(default_factory=lambda: dict(BASELINE_DEV_DEPENDENCIES))
