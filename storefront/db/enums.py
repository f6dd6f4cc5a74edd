from enum import Enum


class UserRoleType(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class ProductSortField(str, Enum):
    CREATED_AT = "createdAt"
    PRICE = "price"
    NAME = "name"
    STOCK = "stock"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"
