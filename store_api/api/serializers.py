"""JSON shapes shared by the storefront and the admin dashboard."""

from store_api.services.uploads import absolute_url


def _iso(value):
    return value.isoformat() if value else None


def product_to_dict(product) -> dict:
    return {
        "id": product.id,
        "title": product.title,
        "description": product.description,
        "price": float(product.price),
        "category": product.category,
        "stock": product.stock,
        "image": absolute_url(product.image),
        "discount": product.discount,
        "rating": float(product.rating),
        "isFeatured": bool(product.is_featured),
        "createdAt": _iso(product.created_at),
        "updatedAt": _iso(product.updated_at),
    }


def category_to_dict(category) -> dict:
    return {
        "id": category.id,
        "name": category.name,
        "description": category.description,
        "image": absolute_url(category.image),
        "createdAt": _iso(category.created_at),
        "updatedAt": _iso(category.updated_at),
    }


def user_to_dict(user) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "phone": user.phone,
        "profileImage": absolute_url(user.profile_image),
        "isBlocked": bool(user.is_blocked),
        "createdAt": _iso(user.created_at),
    }


def order_to_dict(order, include_user: bool = False) -> dict:
    data = {
        "id": order.id,
        "customerName": order.customer_name,
        "total": float(order.total),
        "status": order.status.value,
        "items": order.item_list,
        "shippingAddress": order.shipping_details,
        "UserId": order.user_id,
        "createdAt": _iso(order.created_at),
        "updatedAt": _iso(order.updated_at),
    }
    if include_user:
        user = order.user
        data["userName"] = user.name if user else None
        data["userEmail"] = user.email if user else None
        data["userPhone"] = user.phone if user else None
    return data
