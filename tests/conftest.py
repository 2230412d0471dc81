"""
Общие спецификации для тестов
"""

import copy

import pytest

WIDGET_SPEC = {
    "openapi": "3.0.0",
    "info": {"title": "Widget API", "version": "1.0.0"},
    "components": {
        "schemas": {
            "Widget": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer"},
                    "name": {"type": "string"},
                },
                "required": ["id", "name"],
            }
        }
    },
    "paths": {
        "/widgets": {
            "get": {
                "responses": {
                    "200": {
                        "description": "Список",
                        "content": {
                            "application/json": {
                                "schema": {
                                    "type": "array",
                                    "items": {"$ref": "#/components/schemas/Widget"},
                                }
                            }
                        },
                    }
                }
            }
        }
    },
}

STORE_SPEC = {
    "openapi": "3.0.0",
    "info": {"title": "Store API", "version": "2.0.0"},
    "components": {
        "schemas": {
            "Status": {"type": "string", "enum": ["draft", "published", "archived"]},
            "Category": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer"},
                    "title": {"type": "string"},
                    "parent": {"$ref": "#/components/schemas/Category"},
                },
                "required": ["id", "title"],
            },
            "Product": {
                "type": "object",
                "description": "Товар каталога",
                "properties": {
                    "id": {"type": "integer"},
                    "name": {"type": "string"},
                    "price": {"type": "number"},
                    "email": {"type": "string", "format": "email"},
                    "releaseDate": {"type": "string", "format": "date"},
                    "createdAt": {"type": "string", "format": "date-time"},
                    "inStock": {"type": "boolean"},
                    "status": {"$ref": "#/components/schemas/Status"},
                    "tags": {"type": "array", "items": {"type": "string"}},
                    "category": {"$ref": "#/components/schemas/Category"},
                    "note": {"type": "string", "nullable": True},
                },
                "required": ["id", "name", "price", "status"],
            },
            "ProductInput": {
                "allOf": [
                    {"$ref": "#/components/schemas/Category"},
                    {
                        "type": "object",
                        "properties": {"sku": {"type": "string"}},
                        "required": ["sku"],
                    },
                ]
            },
            "ErrorResponse": {
                "type": "object",
                "properties": {"message": {"type": "string"}},
            },
            "PaginatedProducts": {
                "type": "object",
                "properties": {
                    "data": {
                        "type": "array",
                        "items": {"$ref": "#/components/schemas/Product"},
                    },
                    "total": {"type": "integer"},
                },
            },
        }
    },
    "paths": {
        "/products": {
            "get": {
                "tags": ["products"],
                "summary": "Список товаров",
                "parameters": [
                    {"name": "page", "in": "query", "schema": {"type": "integer"}},
                    {"name": "search", "in": "query", "schema": {"type": "string"}},
                ],
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {
                            "application/json": {
                                "schema": {
                                    "$ref": "#/components/schemas/PaginatedProducts"
                                }
                            }
                        },
                    }
                },
            },
            "post": {
                "tags": ["products"],
                "requestBody": {
                    "content": {
                        "application/json": {
                            "schema": {"$ref": "#/components/schemas/Product"}
                        }
                    }
                },
                "responses": {
                    "201": {
                        "description": "Created",
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/Product"}
                            }
                        },
                    }
                },
            },
        },
        "/products/{productId}": {
            "parameters": [
                {
                    "name": "productId",
                    "in": "path",
                    "required": True,
                    "schema": {"type": "integer"},
                }
            ],
            "get": {
                "tags": ["products"],
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/Product"}
                            }
                        },
                    }
                },
            },
            "put": {
                "tags": ["products"],
                "requestBody": {
                    "content": {
                        "application/json": {
                            "schema": {"$ref": "#/components/schemas/Product"}
                        }
                    }
                },
                "responses": {"200": {"description": "OK"}},
            },
            "delete": {
                "tags": ["products"],
                "responses": {"204": {"description": "Deleted"}},
            },
        },
        "/categories": {
            "get": {
                "tags": ["categories"],
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {
                            "application/json": {
                                "schema": {
                                    "type": "array",
                                    "items": {"$ref": "#/components/schemas/Category"},
                                }
                            }
                        },
                    }
                },
            }
        },
    },
}


@pytest.fixture
def widget_spec():
    return copy.deepcopy(WIDGET_SPEC)


@pytest.fixture
def store_spec():
    return copy.deepcopy(STORE_SPEC)
