"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
import textwrap
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local craprs package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of craprs modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("craprs"):
        del sys.modules[module_name]


LIB_RS = """\
pub fn covered(x: i32) -> i32 {
    if x > 0 {
        1
    } else {
        0
    }
}

pub fn uncovered(a: bool, b: bool) -> bool {
    a && b
}

#[cfg(test)]
mod tests {
    #[test]
    fn it_works() {
        assert_eq!(super::covered(1), 1);
    }
}
"""

NET_MOD_RS = """\
pub fn connect(addrs: &[&str]) -> Result<(), String> {
    for a in addrs {
        try_once(a)?;
    }
    Ok(())
}

fn try_once(_a: &str) -> Result<(), String> {
    Ok(())
}
"""


def _lcov(project: Path) -> str:
    lib = project / "src" / "lib.rs"
    return textwrap.dedent(
        f"""\
        TN:
        SF:{lib}
        DA:1,1
        DA:2,1
        DA:3,1
        DA:5,0
        DA:7,1
        DA:9,0
        DA:10,0
        DA:11,0
        DA:16,1
        DA:17,1
        end_of_record
        """
    )


@pytest.fixture
def rust_project(tmp_path: Path) -> Path:
    """A small Cargo project with an existing LCOV report.

    ``src/lib.rs`` is covered by the report; ``src/net/mod.rs`` is not.
    """
    project = tmp_path / "demo"
    (project / "src" / "net").mkdir(parents=True)
    (project / "Cargo.toml").write_text('[package]\nname = "demo"\nversion = "0.1.0"\n')
    (project / "src" / "lib.rs").write_text(LIB_RS)
    (project / "src" / "net" / "mod.rs").write_text(NET_MOD_RS)
    (project / "lcov.info").write_text(_lcov(project))
    return project
