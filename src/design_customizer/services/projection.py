"""Pure projections of session state for the preview and the cart.

Both the displayed handle and the cart handle resolve through the artifact
named by `state.current`, so the preview and checkout can never disagree.
While the auto-process toggle and `current` agree this is exactly "processed
when the toggle is on, original when it is off"; an enhance performed with the
toggle off is the one case where they differ, and there the displayed artifact
wins.
"""

from design_customizer.domain.images import (
    Artifact,
    DisplayHandle,
    ImageSessionState,
    SessionSnapshot,
)

LOCAL_HANDLE_PREFIX = "blob:"


def displayed_artifact(state: ImageSessionState) -> Artifact | None:
    """Artifact shown in the preview, if any."""
    return state.current_artifact


def displayed_handle(state: ImageSessionState) -> DisplayHandle | None:
    """Display handle of the current artifact, or None."""
    artifact = displayed_artifact(state)
    return artifact.display_handle if artifact else None


def cart_remote_handle(state: ImageSessionState) -> str | None:
    """Remote handle of the displayed artifact; never a local display handle."""
    artifact = displayed_artifact(state)
    if artifact is None or not artifact.remote_handle:
        return None
    if artifact.remote_handle.startswith(LOCAL_HANDLE_PREFIX):
        return None
    return artifact.remote_handle


def can_checkout(state: ImageSessionState) -> bool:
    """Return true when the current design may be submitted to the cart."""
    dimensions = state.dimensions
    return (
        cart_remote_handle(state) is not None
        and dimensions.width_inches > 0
        and dimensions.height_inches > 0
    )


def snapshot(state: ImageSessionState) -> SessionSnapshot:
    """Build the read-only view exposed to the UI layer."""
    return SessionSnapshot(
        current=state.current,
        displayed_handle=displayed_handle(state),
        cart_remote_handle=cart_remote_handle(state),
        auto_process_enabled=state.auto_process_enabled,
        in_flight=state.in_flight,
        errors=dict(state.errors),
        warnings=list(state.warnings),
        dimensions=state.dimensions,
        can_checkout=can_checkout(state),
    )
