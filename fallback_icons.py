from models import to_data_url

ICON_COLOR = "#374151"

_SVG = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24" fill="{color}">{body}</svg>'

FALLBACK_ICON_BODIES = [
    # idea
    '<path d="M12 2.25a.75.75 0 0 1 .75.75v2.392a.75.75 0 0 1-1.5 0V3a.75.75 0 0 1 .75-.75ZM7.5 6a.75.75 0 0 0-.53 1.28L8.25 8.561a.75.75 0 1 0 1.06-1.06L8.03 6.22a.75.75 0 0 0-.53-.22ZM16.5 6a.75.75 0 0 0-.53.22l-1.22 1.22a.75.75 0 1 0 1.06 1.061l1.22-1.22a.75.75 0 0 0-.53-1.281ZM12 7.5a4.5 4.5 0 1 0 0 9 4.5 4.5 0 0 0 0-9ZM3.75 12a.75.75 0 0 0 0 1.5h2.392a.75.75 0 0 0 0-1.5H3.75ZM17.858 12a.75.75 0 0 0 0 1.5h2.392a.75.75 0 0 0 0-1.5h-2.392ZM7.5 18a.75.75 0 0 0-.53.22l-1.22 1.22a.75.75 0 1 0 1.06 1.06l1.22-1.22a.75.75 0 0 0-.53-1.28ZM16.5 18a.75.75 0 0 0-.53 1.28l1.22 1.22a.75.75 0 1 0 1.06-1.06l-1.22-1.22a.75.75 0 0 0-.53-.22ZM12 18.75a.75.75 0 0 1 .75.75v2.392a.75.75 0 0 1-1.5 0V19.5a.75.75 0 0 1 .75-.75Z"/>',
    # arrow
    '<path fill-rule="evenodd" d="M16.28 11.47a.75.75 0 0 1 0 1.06l-7.5 7.5a.75.75 0 0 1-1.06-1.06L14.69 12 7.72 5.03a.75.75 0 0 1 1.06-1.06l7.5 7.5Z" clip-rule="evenodd"/>',
    # flame
    '<path fill-rule="evenodd" d="M12.963 2.286a.75.75 0 0 0-1.071 1.052A11.202 11.202 0 0 1 11.25 10.5a1.5 1.5 0 0 1-3 0 1.5 1.5 0 0 0-3 0c0 .981.32 1.894.872 2.614.54.708 1.274 1.264 2.128 1.634a.75.75 0 1 0 .83-1.802c-.56-.26-1.06-.656-1.46-1.126a9.703 9.703 0 0 0-.572-2.344 1.5 1.5 0 0 1 3 0c0 .225.026.446.076.662a.75.75 0 0 0 1.43-.33A12.702 12.702 0 0 0 12.963 2.286Z" clip-rule="evenodd"/>',
    # sun
    '<path d="M12 1.5a.75.75 0 0 1 .75.75V3a.75.75 0 0 1-1.5 0V2.25A.75.75 0 0 1 12 1.5ZM18.682 6.098a.75.75 0 0 1 1.06 1.06l-.707.707a.75.75 0 0 1-1.06-1.06l.707-.707ZM21.75 12a.75.75 0 0 1 .75.75v1.5a.75.75 0 0 1-1.5 0v-1.5a.75.75 0 0 1 .75-.75ZM18.682 17.902a.75.75 0 0 1 .707.707l-1.06 1.06a.75.75 0 1 1-1.06-1.06l1.06-1.06a.75.75 0 0 1 .353-.707ZM12 21.75a.75.75 0 0 1 .75.75v1.5a.75.75 0 0 1-1.5 0v-1.5a.75.75 0 0 1 .75-.75ZM5.318 17.902a.75.75 0 0 1 1.06.707l-.707 1.06a.75.75 0 0 1-1.06-1.06l.707-.707ZM2.25 12a.75.75 0 0 1 .75-.75h1.5a.75.75 0 0 1 0 1.5h-1.5a.75.75 0 0 1-.75-.75ZM5.318 6.098a.75.75 0 0 1 .707-.707l1.06 1.06a.75.75 0 1 1-1.06 1.06L5.318 6.098ZM12 6.75a5.25 5.25 0 1 0 0 10.5 5.25 5.25 0 0 0 0-10.5Z"/>',
]

FALLBACK_ICON_SVGS = [_SVG.format(color=ICON_COLOR, body=body) for body in FALLBACK_ICON_BODIES]


def get_fallback_icons(count):
    """Return `count` SVG data URLs, cycling through the built-in icons."""
    if count <= 0:
        return []
    return [
        to_data_url(FALLBACK_ICON_SVGS[i % len(FALLBACK_ICON_SVGS)].encode("utf-8"), "image/svg+xml")
        for i in range(count)
    ]
