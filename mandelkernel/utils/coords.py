def pixel_to_world(px, py, center_x, center_y, zoom, image_width,
                   image_height):
    inv_zoom = 1.0 / zoom
    wx = center_x + (px - image_width * 0.5) * inv_zoom
    # screen Y grows down, world Y grows up
    wy = center_y - (py - image_height * 0.5) * inv_zoom
    return wx, wy


def world_to_pixel(wx, wy, center_x, center_y, zoom, image_width,
                   image_height):
    px = image_width * 0.5 + (wx - center_x) * zoom
    py = image_height * 0.5 - (wy - center_y) * zoom
    return px, py
