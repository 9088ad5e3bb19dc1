from __future__ import annotations

from cachetools.func import lru_cache  # type: ignore

from .backend import ClusterBackend
from .commands import CommandBuilder
from .context import ClusterContext
from .gateway import ClientGateway
from .interactive import DEFAULT_DEBUG_IMAGE, DEFAULT_SHELL, InteractiveOps
from .mutations import MutationOps


@lru_cache(maxsize=1)
def get_cluster_backend() -> ClusterBackend:
    """Get the shared ClusterBackend.

    Returns:
        A Kr8sBackend instance
    """
    from .kr8s_backend import Kr8sBackend

    return Kr8sBackend()


def get_gateway() -> ClientGateway:
    return ClientGateway(get_cluster_backend())


def get_mutations() -> MutationOps:
    return MutationOps(get_cluster_backend())


def get_interactive_ops(
    ctx: ClusterContext,
    *,
    kubectl_path: str = "kubectl",
    shell: str = DEFAULT_SHELL,
    debug_image: str = DEFAULT_DEBUG_IMAGE,
) -> InteractiveOps:
    """Get InteractiveOps bound to ``ctx`` and the host's terminal launcher."""
    from kubeintel.terminal import get_terminal_launcher

    return InteractiveOps(
        ctx,
        CommandBuilder(tool=kubectl_path),
        get_terminal_launcher(),
        shell=shell,
        debug_image=debug_image,
    )
