from __future__ import annotations

import pytest

from testignore.models.context import Context, make_context

SAMPLE_MANIFEST = """\
# Known failures per backend/platform.

singlepass+aarch64+macos traps::test_trap_trace  # signal handling differs
llvm traps::test_trap_trace

windows wasitests::snapshot1::host_fs   # no host fs on windows yet
wasitests::snapshot1::host_fs::writing
cranelift+x86_64 spec::simd::
"""


@pytest.fixture
def sample_manifest() -> str:
    return SAMPLE_MANIFEST


@pytest.fixture
def linux_llvm() -> Context:
    return make_context(backend="llvm", arch="x86_64", os="linux")
