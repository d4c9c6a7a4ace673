from __future__ import annotations

import asyncio
from types import SimpleNamespace

from genro_navigation import (
    LayoutState,
    LoadingBar,
    MiddlewareRegistry,
    NavigationGuard,
    Navigator,
    Redirect,
    RouteDescriptor,
    ViewDefinition,
)

# Application store shared by middleware and data hooks
store = SimpleNamespace(user=None, capabilities=set())


def guest(to, from_):
    """Logged-in users have nothing to do on the login and signup pages."""
    if store.user is not None:
        return Redirect("/admin")


def authenticated(to, from_):
    if store.user is None:
        return Redirect({"name": "login", "query": {"next": to.full_path}})


async def load_thumbnail(context):
    # Stands in for an HTTP call
    await asyncio.sleep(0)
    return {"slug": context.params["slug"], "width": 320, "height": 200}


async def thumbnail_view():
    """Lazily loaded view, resolved on first navigation."""
    return ViewDefinition(
        name="thumbnail",
        layout="admin",
        middleware="authenticated",
        asyncData=load_thumbnail,
        data={"format": "png"},
    )


routes = [
    RouteDescriptor("/", name="home", views=ViewDefinition(name="home", layout="default")),
    RouteDescriptor("/about", name="about", views=ViewDefinition(name="about", loading=False)),
    RouteDescriptor("/login", name="login", views=ViewDefinition(name="login", middleware="guest")),
    RouteDescriptor("/signup", name="signup", views=ViewDefinition(name="signup", middleware="guest")),
    RouteDescriptor(
        "/admin",
        name="admin",
        views=ViewDefinition(name="admin", layout="admin", middleware="authenticated"),
        children=[
            RouteDescriptor(
                "thumbnails/:slug",
                name="thumbnail",
                views=thumbnail_view,
                meta={"allow_rule": "media"},
            ),
        ],
    ),
    RouteDescriptor("/home", redirect="/"),
]


if __name__ == "__main__":
    registry = MiddlewareRegistry({"guest": guest, "authenticated": authenticated})
    registry.use("logging", flags="log:off,print").use("allow", store=store, fallback="/admin")
    registry.freeze()

    bar = LoadingBar()
    bar.subscribe(lambda running: print(f"    [loading bar {'on' if running else 'off'}]"))
    layout = LayoutState()
    guard = NavigationGuard(
        registry, bar, layout, store=store, global_middleware=["logging", "allow"]
    )
    navigator = Navigator(routes, guard)

    async def main():
        print("--- 1. Anonymous visit to the admin area ---")
        await navigator.push("/admin/thumbnails/sunset")
        print(f"Landed on: {navigator.current}")

        print("\n--- 2. Logged in, without the 'media' capability ---")
        store.user = "ada"
        await navigator.push("/admin/thumbnails/sunset")
        print(f"Landed on: {navigator.current} (layout={layout.layout!r})")

        print("\n--- 3. Logged in, with the 'media' capability ---")
        store.capabilities = {"media"}
        result = await navigator.push("/admin/thumbnails/sunset#preview")
        print(f"Landed on: {navigator.current}")
        print(f"Data: {result.data}")
        print(f"Scroll target: {navigator.scroll_target}")

        print("\n--- 4. Logged-in user opening the login page ---")
        await navigator.push("/login")
        print(f"Landed on: {navigator.current}")

        print("\n--- 5. Legacy path ---")
        await navigator.push("/home")
        print(f"Landed on: {navigator.current} (layout={layout.layout!r})")

    asyncio.run(main())
