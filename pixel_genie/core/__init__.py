"""Core orchestration package.

Architectural role:
    Exposes the request orchestrator that sits between the HTTP/CLI surfaces and
    the text and image adapters.

Composition:
    - `engine`: two-step pipeline and its error conversion.
    - `state`: generation state schema read by the surfaces.

Determinism and side effects:
    Package import itself is side-effect free. Runtime side effects (remote calls)
    are performed by `engine` during a submission.
"""
