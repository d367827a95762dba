from __future__ import annotations

from testignore.config.schema import AppConfig

BACKENDS = ["singlepass", "cranelift", "llvm"]
ARCHES = ["x86_64", "aarch64", "riscv64"]
OPERATING_SYSTEMS = ["linux", "macos", "windows", "freebsd"]


def default_config() -> AppConfig:
    return AppConfig(
        aliases={
            "unix": ["linux", "macos", "freebsd"],
            "optimizing": ["cranelift", "llvm"],
        },
        known_tags=[*BACKENDS, *ARCHES, *OPERATING_SYSTEMS, "musl"],
    )
