"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from worksync.payroll import Payroll


def get_payroll(request: Request) -> Payroll:
    """Get the Payroll facade created at application startup."""
    return request.app.state.payroll


async def get_user_id(
    x_user_id: Annotated[str | None, Header()] = None
) -> str:
    """Extract the authenticated caller id set by the identity layer."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-User-Id header is required",
        )
    return x_user_id.strip()


# Type aliases for cleaner dependency injection
PayrollDep = Annotated[Payroll, Depends(get_payroll)]
UserId = Annotated[str, Depends(get_user_id)]
