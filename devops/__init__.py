# devops package
# Ingests Jenkins WorkflowRun lifecycle events and persists pipeline run data.
#
# Subpackages:
#   - event: envelope decoding, tag-discriminated actions, phase dispatch
#   - store: key-value run data store backed by versioned documents
#   - api: FastAPI webhook surface
#   - config: runtime.yaml + environment overrides
