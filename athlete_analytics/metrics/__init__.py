"""Engine components, leaf-first: trend → workload/readiness/reconciliation → nutrition → risk."""
