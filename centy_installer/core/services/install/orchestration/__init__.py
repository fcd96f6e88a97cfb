from centy_installer.core.services.install.orchestration.pipeline import (  # noqa: F401
    install,
    run_pipeline,
)
