"""
Testkube CLI installer service — package re-exports.

Layers, innermost first:

    data → resolver → detection → execution → orchestration

    from setup_testkube.core.services.installer import run_pipeline
"""

# ── L0: Data ──
from setup_testkube.core.services.installer.data.constants import (  # noqa: F401
    DEFAULT_SOURCE,
    ReleaseSource,
)

# ── L2: Resolver ──
from setup_testkube.core.services.installer.resolver.version import (  # noqa: F401
    resolve_version,
    select_release,
)

# ── L3: Detection ──
from setup_testkube.core.services.installer.detection.install_path import (  # noqa: F401
    resolve_install_dir,
)
from setup_testkube.core.services.installer.detection.install_state import (  # noqa: F401
    check_installed,
)
from setup_testkube.core.services.installer.detection.platform import (  # noqa: F401
    detect_platform,
)
from setup_testkube.core.services.installer.detection.prerequisites import (  # noqa: F401
    check_prerequisite,
)

# ── L4: Execution ──
from setup_testkube.core.services.installer.execution.context import (  # noqa: F401
    build_context_args,
    configure_context,
)
from setup_testkube.core.services.installer.execution.download import (  # noqa: F401
    build_download_url,
)
from setup_testkube.core.services.installer.execution.tool_cache import (  # noqa: F401
    ToolCache,
    add_to_path,
)

# ── L5: Orchestration ──
from setup_testkube.core.services.installer.orchestration.pipeline import (  # noqa: F401
    run_pipeline,
)
