# main.py

import uuid
from contextlib import asynccontextmanager, contextmanager
from threading import Lock

from fastapi import FastAPI, Request, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from order_api import config
from order_api.database import create_connection, create_tables
from order_api.errors import AppError, ErrorKind
from order_api.logger import log_info, log_error, log_warning
from order_api.repositories import SqliteCustomersRepository, SqliteOrdersRepository, SqliteProductsRepository
from order_api.schemas import (
    CustomerRequest,
    CustomerResponse,
    ErrorResponse,
    OrderRequest,
    OrderResponse,
    ProductRequest,
    ProductResponse,
)
from order_api.services import CreateCustomerService, CreateOrderService, CreateProductService, FindOrderService


# Status code returned for each kind of business error
ERROR_STATUS_CODES = {
    ErrorKind.CUSTOMER_NOT_FOUND: 400,
    ErrorKind.PRODUCTS_NOT_FOUND: 400,
    ErrorKind.INSUFFICIENT_STOCK: 400,
    ErrorKind.INVALID_QUANTITY: 400,
    ErrorKind.EMAIL_IN_USE: 400,
    ErrorKind.PRODUCT_EXISTS: 400,
    ErrorKind.ORDER_NOT_FOUND: 404,
}


# Initialize database connection, create tables on startup, and close connection on shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Set up the database connection and create tables on startup.
    Close the connection on shutdown.
    """
    log_info("Creating database connection and tables...")
    conn = create_connection(config.DB_FILE)
    create_tables(conn=conn)
    # one connection shared by every request, used by one unit of work at a time
    app.state.db_conn = conn
    app.state.db_lock = Lock()
    log_info("Starting up the Order API...")

    yield
    # on shutdown, close the database connection
    log_info("Shutting down the Order API...")
    app.state.db_conn = None
    conn.close()
    log_info("Database connection closed.")

# Initialize FastAPI app with lifespan for startup and shutdown events
app = FastAPI(title="Order API", lifespan=lifespan)

# Set up a middleware to generate request_id for each request and log it
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """
    Reuse the Request-ID header when the client sends one, otherwise generate a new one.
    """
    request_id = request.headers.get("Request-ID")
    if request_id:
        log_info(f"Received Request-ID header: {request_id}", request_id=request_id)
    else:
        request_id = str(uuid.uuid4())
        log_info("No Request-ID header found, generated a new request ID.", request_id=request_id)
    request.state.request_id = request_id

    log_info(f"Received request: {request.method} {request.url}", request_id=request_id)

    response = await call_next(request)
    # add the request_id to the response headers for tracking
    response.headers["Request-ID"] = request_id
    log_info(f"Completed request: {request.method} {request.url} with status {response.status_code}", request_id=request_id)
    return response

# Translate business errors raised by the services into HTTP responses
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    status_code = ERROR_STATUS_CODES.get(exc.kind, 400)
    log_warning(f"{exc.kind.value}: {exc.message}", request_id=getattr(request.state, "request_id", "N/A"))
    body = ErrorResponse(message=exc.message)
    return JSONResponse(content=body.model_dump(), status_code=status_code)

# Server errors use the same body shape as business errors
@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    body = ErrorResponse(message=str(exc.detail))
    return JSONResponse(content=body.model_dump(), status_code=exc.status_code, headers=exc.headers)

# Rejected input is not echoed back, it may hold values JSON cannot encode such as Infinity
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [{key: value for key, value in error.items() if key != "input"} for error in exc.errors()]
    log_warning(f"Invalid request body: {len(errors)} errors", request_id=getattr(request.state, "request_id", "N/A"))
    return JSONResponse(content={"detail": jsonable_encoder(errors)}, status_code=422)


@contextmanager
def unit_of_work(request: Request):
    """
    Hand out the shared connection for one request.

    Everything written inside the block is committed together when it exits
    cleanly and rolled back otherwise.
    """
    conn = request.app.state.db_conn
    with request.app.state.db_lock:
        try:
            yield conn
            conn.commit()
        except AppError:
            conn.rollback()
            raise
        except Exception as e:
            conn.rollback()
            log_error(f"Unexpected error while handling request: {e!r}", request_id=request.state.request_id)
            raise HTTPException(status_code=500, detail="Internal Server Error")


# API: /customers - POST to register a customer
@app.post("/customers")
def create_customer(request: Request, customer: CustomerRequest):
    with unit_of_work(request) as conn:
        service = CreateCustomerService(SqliteCustomersRepository(conn))
        created = service.execute(name=customer.name, email=customer.email)

    log_info(f"Customer created: {created.id}", request_id=request.state.request_id)
    response = CustomerResponse.model_validate(created)
    return JSONResponse(content=response.model_dump(), status_code=201)

# API: /products - POST to register a product
@app.post("/products")
def create_product(request: Request, product: ProductRequest):
    with unit_of_work(request) as conn:
        service = CreateProductService(SqliteProductsRepository(conn))
        created = service.execute(name=product.name, price=product.price, quantity=product.quantity)

    log_info(f"Product created: {created.id}", request_id=request.state.request_id)
    response = ProductResponse.model_validate(created)
    return JSONResponse(content=response.model_dump(), status_code=201)

# API: /orders - POST to create a new order
@app.post("/orders")
def create_order(request: Request, order: OrderRequest):
    """
    Create a new order.

    Stock update and order insert are committed in the same transaction, so a
    failure while saving the order leaves the stock untouched.
    """
    log_info(f"Creating order for customer {order.customer_id} with {len(order.products)} products", request_id=request.state.request_id)
    with unit_of_work(request) as conn:
        service = CreateOrderService(
            orders_repository=SqliteOrdersRepository(conn),
            products_repository=SqliteProductsRepository(conn),
            customers_repository=SqliteCustomersRepository(conn),
        )
        created = service.execute(
            customer_id=order.customer_id,
            products=[{"id": item.id, "quantity": item.quantity} for item in order.products],
        )

    log_info(f"Order created: {created.id}", request_id=request.state.request_id)
    response = OrderResponse.model_validate(created)
    return JSONResponse(content=response.model_dump(), status_code=201)

# API: /orders/{order_id} - GET to read a specific order
@app.get("/orders/{order_id}")
def read_order(request: Request, order_id: str):
    """
    Retrieve a specific order by order_id.
    """
    log_info(f"Reading order: {order_id}", request_id=request.state.request_id)
    with unit_of_work(request) as conn:
        found = FindOrderService(SqliteOrdersRepository(conn)).execute(order_id=order_id)

    response = OrderResponse.model_validate(found)
    return JSONResponse(content=response.model_dump(), status_code=200)
