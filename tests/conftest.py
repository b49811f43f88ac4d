"""
Pytest fixtures for cfmeta tests.
"""

import os
import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# Add project root to path for cfmeta imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture(autouse=True)
def clean_cfmeta_env(monkeypatch):
    """Keep CFMETA_* variables from the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("CFMETA_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_ts_file(temp_dir: Path) -> Path:
    """Create a TypeScript file with two custom functions and a helper."""
    file_path = temp_dir / "functions.ts"
    file_path.write_text('''
/**
 * Adds two numbers.
 * @customfunction
 * @helpurl https://example.com/help/add
 * @param first - First number
 * @param second Second number
 */
export function add(first: number, second: number): number {
    return first + second;
}

function helper(x: number): number {
    return x * 2;
}

/**
 * Counts up once a second.
 * @CustomFunction
 * @param incrementBy Amount to add each tick
 */
function increment(incrementBy: number, handler: CustomFunctions.StreamingHandler<number>): void {
    let result = 0;
    const timer = setInterval(() => {
        result += incrementBy;
        handler.setResult(result);
    }, 1000);
    handler.onCanceled = () => clearInterval(timer);
}
''')
    return file_path


@pytest.fixture
def sample_js_file(temp_dir: Path) -> Path:
    """Create an untyped JavaScript file."""
    file_path = temp_dir / "functions.js"
    file_path.write_text('''
/**
 * Echoes its input.
 * @customfunction
 * @param value Anything
 */
function echo(value) {
    return value;
}
''')
    return file_path


@pytest.fixture
def invalid_ts_file(temp_dir: Path) -> Path:
    """Create a TypeScript file where one custom function has a bad type."""
    file_path = temp_dir / "broken.ts"
    file_path.write_text('''
/** @customfunction */
function good(x: number): number {
    return x;
}

/** @customfunction */
function bad(values: number[]): number {
    return values.length;
}
''')
    return file_path
