"""
Pipelines — Kubeflow Pipelines (KFP v2) steps for batch note chunking.

Each component is a self-contained Python function decorated with
``@kfp.dsl.component`` so it can run in its own container; the chunking
step installs ``note-chunker`` and calls into its ingestion API.
"""
