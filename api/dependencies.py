from fastapi import HTTPException, Request, status

from workflows.order_workflow import OrderWorkflow


def get_order_workflow(request: Request) -> OrderWorkflow:
    store = getattr(request.app.state, "order_store", None)
    if store is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Order store unavailable")
    return OrderWorkflow(store, request.app.state.feature_flags)
