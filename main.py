import os
import time
import uuid
from fastapi import Depends, FastAPI, HTTPException, Request, Response
from loguru import logger
from dotenv import load_dotenv
from typing import List
from prometheus_client import Counter, Gauge, Histogram, generate_latest, CONTENT_TYPE_LATEST
from models import Product, seed_products
from schemas import ProductCreate, ProductUpdate, ProductResponse
from store import ProductNotFound, ProductStore

# Chargement des variables d'environnement
load_dotenv()

SERVICE_NAME = "product-catalog-service"
PRODUCTS_PATH = "/api/products"

# Config logging JSON (niveaux INFO, WARNING, ERROR)
logger.remove()
logger.add(
    sink=os.getenv("LOG_FILE", "logs.json"),
    format="{time:YYYY-MM-DDTHH:mm:ss.SSSZ} | {level} | {message} | {extra}",
    level=os.getenv("LOG_LEVEL", "INFO"),
    serialize=True,
    rotation="1 day",
)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "method", "endpoint", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["service", "method", "endpoint"]
)
ERROR_COUNT = Counter(
    "http_errors_total",
    "Total HTTP errors",
    ["service", "endpoint", "error_type"]
)
PRODUCT_COUNT = Gauge(
    "catalog_products",
    "Number of products currently held in memory",
    ["service"]
)

app = FastAPI(title="Product Catalog Service")

# Catalogue en mémoire, détenu par l'application et perdu au redémarrage
app.state.store = ProductStore()
app.state.store.reset(seed_products())
# Lu à chaque scrape: suit aussi les remplacements de app.state.store
PRODUCT_COUNT.labels(service=SERVICE_NAME).set_function(lambda: len(app.state.store))


def get_store(request: Request) -> ProductStore:
    return request.app.state.store


def not_found(product_id: int, endpoint: str) -> HTTPException:
    logger.warning(f"Product {product_id} not found")
    ERROR_COUNT.labels(service=SERVICE_NAME, endpoint=endpoint, error_type="not_found").inc()
    return HTTPException(status_code=404, detail="Product not found")


# Middleware pour logger les requests avec correlation ID
@app.middleware("http")
async def log_requests(request: Request, call_next):
    # Generate or propagate correlation ID (trace-id)
    trace_id = request.headers.get("X-Trace-ID", str(uuid.uuid4()))
    start_time = time.time()

    with logger.contextualize(trace_id=trace_id, service=SERVICE_NAME):
        logger.info(
            f"Request: {request.method} {request.url.path}",
            extra={"method": request.method, "url": str(request.url), "trace_id": trace_id}
        )

        response = await call_next(request)

        latency = time.time() - start_time

        REQUEST_COUNT.labels(
            service=SERVICE_NAME,
            method=request.method,
            endpoint=request.url.path,
            status=response.status_code
        ).inc()
        REQUEST_LATENCY.labels(
            service=SERVICE_NAME,
            method=request.method,
            endpoint=request.url.path
        ).observe(latency)

        logger.info(
            f"Response status: {response.status_code}",
            extra={"status": response.status_code, "latency": latency, "trace_id": trace_id}
        )

        response.headers["X-Trace-ID"] = trace_id
        return response


@app.get("/metrics")
async def metrics():
    """Endpoint /metrics compatible Prometheus"""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy", "service": SERVICE_NAME}


@app.get(PRODUCTS_PATH, response_model=List[ProductResponse])
async def list_products(store: ProductStore = Depends(get_store)):
    logger.info("Fetching all products")
    return store.list_products()


@app.get(PRODUCTS_PATH + "/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, store: ProductStore = Depends(get_store)):
    logger.info(f"Fetching product {product_id}")
    try:
        return store.get_product(product_id)
    except ProductNotFound:
        raise not_found(product_id, PRODUCTS_PATH + "/{product_id}")


@app.post(PRODUCTS_PATH, response_model=ProductResponse, status_code=201)
async def create_product(product: ProductCreate, response: Response, store: ProductStore = Depends(get_store)):
    """
    Ajoute le produit en fin de catalogue, sans contrôle d'unicité:
    l'id fourni par l'appelant est conservé tel quel.
    """
    logger.info(f"Creating product {product.id}: {product.name}")
    created = store.add_product(Product(**product.model_dump()))
    response.headers["Location"] = f"{PRODUCTS_PATH}/{created.id}"
    return created


@app.put(PRODUCTS_PATH + "/{product_id}", status_code=204)
async def update_product(product_id: int, product: ProductUpdate, store: ProductStore = Depends(get_store)):
    logger.info(f"Updating product {product_id}")
    try:
        store.update_product(product_id, product.name, product.price)
    except ProductNotFound:
        raise not_found(product_id, PRODUCTS_PATH + "/{product_id}")
    return Response(status_code=204)


@app.delete(PRODUCTS_PATH + "/{product_id}", status_code=204)
async def delete_product(product_id: int, store: ProductStore = Depends(get_store)):
    logger.info(f"Deleting product {product_id}")
    try:
        store.remove_product(product_id)
    except ProductNotFound:
        raise not_found(product_id, PRODUCTS_PATH + "/{product_id}")
    return Response(status_code=204)


if __name__ == "__main__":
    port = int(os.getenv("PORT", 8001))
    logger.info(f"Starting Product Catalog Service on port {port}")
    import uvicorn
    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=port)
