from scrollspy import nav_html, scrollspy_script, section_anchor


def test_nav_lists_only_given_sections_and_marks_active():
    sections = [({"id": 5, "name": "Пицца", "emoji": "🍕"}, [{}]), ({"id": 6, "name": "Напитки"}, [{}])]
    out = nav_html(sections, active_id=6)
    assert 'href="#cat-5">🍕 Пицца</a>' in out
    assert '<a href="#cat-6" class="active">Напитки</a>' in out
    assert "cat-7" not in out


def test_nav_escapes_names():
    out = nav_html([({"id": 1, "name": "<b>x</b>"}, [{}])])
    assert "&lt;b&gt;x&lt;/b&gt;" in out


def test_script_registers_and_removes_listener():
    js = scrollspy_script([section_anchor({"id": 5}), "cat-6"], offset=100)
    assert '["cat-5", "cat-6"]' in js
    assert "const offset = 100;" in js
    assert js.count("addEventListener('scroll'") == 2
    assert js.count("removeEventListener('scroll'") == 2
    assert "pagehide" in js
