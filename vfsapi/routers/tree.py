from typing import Optional
from fastapi import APIRouter, Depends, Query, Request

from vfsapi.dependencies import get_context
from vfsapi.schemas.commands import TreeResponse
from vfsapi.services.context import FileSystemContext

router = APIRouter(prefix="/api/tree", tags=["tree"])


@router.get("", response_model=TreeResponse)
def get_tree(
    request: Request,
    print_root: Optional[bool] = Query(None, description="Include the root line"),
    context: FileSystemContext = Depends(get_context),
):
    """
    Render the whole file system tree as text
    """
    if print_root is None:
        print_root = request.app.state.settings.print_root

    return TreeResponse(tree=context.print_tree(print_root))
