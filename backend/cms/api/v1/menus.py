from flask import request, jsonify
from flask_jwt_extended import jwt_required
from cms.application.menus.sync_menu import create_menu as create_menu_service
from cms.application.menus.sync_menu import sync_menu
from cms.application.menus.public_tree import get_menu_tree, get_public_tree
from cms.application.menus.menu_items import (
    get_menu_or_404,
    add_menu_item as add_menu_item_service,
    update_menu_item as update_menu_item_service,
    delete_menu_item as delete_menu_item_service,
    delete_menu as delete_menu_service,
)
from cms.normalizers.menu import normalize_menu_item
from cms.validators.menu import validate_menu_payload, validate_menu_item_payload
from cms.utils.decorators import roles_required, current_actor_id
from . import v1_bp


@v1_bp.route("/menus", methods=["POST"])
@jwt_required()
@roles_required("admin", "editor")
def create_menu():
    data = validate_menu_payload(request.get_json(silent=True), require_tree=False)
    actor_id = current_actor_id()

    menu = create_menu_service(data=data, actor_id=actor_id)

    # A tree sent along with the new menu is synced right away
    if data.get("tree"):
        menu = sync_menu(menu_id=menu.id, data={"tree": data["tree"]}, actor_id=actor_id)

    return jsonify(get_menu_tree(menu)), 201


@v1_bp.route("/menus/<int:menu_id>", methods=["PUT"])
@jwt_required()
@roles_required("admin", "editor")
def update_menu(menu_id):
    data = validate_menu_payload(request.get_json(silent=True))

    menu = sync_menu(menu_id=menu_id, data=data, actor_id=current_actor_id())
    return jsonify(get_menu_tree(menu)), 200


@v1_bp.route("/menus/<slug>/tree", methods=["GET"])
def get_menu(slug):
    return jsonify(get_public_tree(slug)), 200


@v1_bp.route("/menus/<int:menu_id>", methods=["DELETE"])
@jwt_required()
@roles_required("admin", "editor")
def delete_menu(menu_id):
    delete_menu_service(menu_id=menu_id, actor_id=current_actor_id())
    return jsonify({"message": "Menu deleted successfully"}), 200


# ------------------------
# Single items
# ------------------------

def _item_response(menu_id, item):
    menu = get_menu_or_404(menu_id)
    return {
        "item": normalize_menu_item(item, {}),
        "menu": get_menu_tree(menu),
    }


@v1_bp.route("/menus/<int:menu_id>/items", methods=["POST"])
@jwt_required()
@roles_required("admin", "editor")
def add_menu_item(menu_id):
    data = validate_menu_item_payload(request.get_json(silent=True))

    item = add_menu_item_service(menu_id=menu_id, data=data, actor_id=current_actor_id())
    return jsonify(_item_response(menu_id, item)), 201


@v1_bp.route("/menus/<int:menu_id>/items/<int:item_id>", methods=["PUT"])
@jwt_required()
@roles_required("admin", "editor")
def update_menu_item(menu_id, item_id):
    data = validate_menu_item_payload(request.get_json(silent=True), partial=True)

    item = update_menu_item_service(
        menu_id=menu_id, item_id=item_id, data=data, actor_id=current_actor_id()
    )
    return jsonify(_item_response(menu_id, item)), 200


@v1_bp.route("/menus/<int:menu_id>/items/<int:item_id>", methods=["DELETE"])
@jwt_required()
@roles_required("admin", "editor")
def delete_menu_item(menu_id, item_id):
    deleted = delete_menu_item_service(menu_id=menu_id, item_id=item_id, actor_id=current_actor_id())
    return jsonify({"deleted": deleted}), 200
