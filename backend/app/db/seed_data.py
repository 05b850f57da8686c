"""
Database Seed Data Module

The built-in template marketplace. Template ids are fixed because the
keyword mapping table (app/config/keyword_mappings.yml) refers to them.

Run with: python -m app.db.seed_data          (insert when the table is empty)
          python -m app.db.seed_data reset    (replace the catalogue)
"""
import asyncio
import sys
from typing import Any, Dict, List

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import AsyncSessionLocal, close_db, init_db
from app.core.logging_config import logger
from app.models.template import Template


# ==================== Content helpers ====================

def _box(x: int, y: int, width: str, components: List[Dict[str, Any]], columns: int = 1, height: int = 300) -> Dict[str, Any]:
    return {
        "position_x": x,
        "position_y": y,
        "width": width,
        "height": height,
        "columns": columns,
        "components": components,
    }


def _component(type_: str, props: Dict[str, Any], width: str = "100%", height: int = 60, column: int = 0) -> Dict[str, Any]:
    return {"type": type_, "width": width, "height": height, "props": props, "column_index": column}


def _text(content: str, **style) -> Dict[str, Any]:
    return _component("text", {"content": content, "style": style})


def _button(content: str, **style) -> Dict[str, Any]:
    return _component("button", {"content": content, "style": style}, width="120px", height=40)


def _image(src: str, alt: str = "") -> Dict[str, Any]:
    return _component("image", {"src": src, "alt": alt}, height=200)


def _table(rows: List[List[str]], **style) -> Dict[str, Any]:
    return _component("table", {"data": rows, "style": style}, height=160)


def _card(title: str, content: str, column: int = 0) -> Dict[str, Any]:
    return _component("card", {"title": title, "content": content}, height=160, column=column)


# ==================== Sample Data Constants ====================

SAMPLE_TEMPLATES: List[Dict[str, Any]] = [
    {
        "id": 1,
        "name": "商业计划书模板",
        "description": "优雅的商业展示模板",
        "thumbnail": "/templates/business-plan.jpg",
        "category": "business",
        "keywords": ["商业", "计划书", "business"],
        "content": {"boxes": [
            _box(40, 20, "50%", [
                _text("商业计划书", fontSize=24, color="#2c3e50", fontWeight="bold"),
                _text("公司: 未来科技有限公司\n目标: 技术创新", fontSize=14, color="#7f8c8d"),
            ]),
            _box(40, 20, "50%", [
                _table([["目标", "收入", "用户数"], ["短期", "$1M", "10K"], ["长期", "$5M", "50K"]],
                       border="1px solid #ecf0f1"),
                _button("查看详情", backgroundColor="#3498db", color="#fff"),
            ]),
        ]},
    },
    {
        "id": 2,
        "name": "电商首页模板",
        "description": "商城首页，包含横幅和商品推荐",
        "thumbnail": "/templates/shop-home.jpg",
        "category": "ecommerce",
        "keywords": ["电商", "商城", "购物", "首页"],
        "content": {"boxes": [
            _box(0, 0, "100%", [
                _image("/templates/assets/banner.jpg", "促销横幅"),
            ], height=220),
            _box(0, 20, "100%", [
                _card("新品上市", "春季新款，限时八折", column=0),
                _card("热销爆款", "销量第一的人气单品", column=1),
                _card("会员专享", "积分兑换好礼", column=2),
            ], columns=3),
        ]},
    },
    {
        "id": 3,
        "name": "个人简历模板",
        "description": "简洁现代的简历设计",
        "thumbnail": "/templates/resume.jpg",
        "category": "personal",
        "keywords": ["简历", "求职", "resume"],
        "content": {"boxes": [
            _box(40, 20, "30%", [
                _image("/templates/assets/resume-profile.jpg", "头像"),
                _text("张三\n123-456-7890", fontSize=16, color="#34495e", textAlign="center"),
            ], height=350),
            _box(20, 20, "60%", [
                _text("个人简历", fontSize=22, color="#2980b9"),
                _table([["项目", "内容"], ["教育", "北京大学，2018-2022"], ["经验", "XYZ公司，2022至今"],
                        ["技能", "Figma: 85%"]], fontSize=14),
            ], height=350),
        ]},
    },
    {
        "id": 4,
        "name": "商品详情模板",
        "description": "展示单个商品的图片、参数和购买入口",
        "thumbnail": "/templates/product.jpg",
        "category": "ecommerce",
        "keywords": ["商品", "详情", "电商"],
        "content": {"boxes": [
            _box(40, 20, "100%", [
                _image("/templates/assets/product.jpg", "商品图片"),
                _component("radio", {"options": ["红色", "蓝色", "黑色"], "value": "红色"}, column=1),
                _button("立即购买", backgroundColor="#e74c3c", color="#fff"),
            ], columns=2, height=360),
            _box(40, 20, "100%", [
                _table([["参数", "规格"], ["重量", "1.2kg"], ["尺寸", "30x20x10cm"]]),
            ]),
        ]},
    },
    {
        "id": 5,
        "name": "教育演示模板",
        "description": "适合课堂展示的教学课件",
        "thumbnail": "/templates/education.jpg",
        "category": "education",
        "keywords": ["教育", "教学", "课件"],
        "content": {"boxes": [
            _box(40, 20, "100%", [
                _text("第一章：概述", fontSize=26, color="#16a085", fontWeight="bold"),
                _text("本节课的学习目标与重点内容", fontSize=16),
            ]),
            _box(40, 20, "100%", [
                _component("checkbox", {"options": ["已预习", "已完成练习", "有疑问"], "value": []}),
                _button("开始测验", backgroundColor="#1abc9c", color="#fff"),
            ]),
        ]},
    },
    {
        "id": 6,
        "name": "个人博客模板",
        "description": "记录生活的个人博客首页",
        "thumbnail": "/templates/blog.jpg",
        "category": "blog",
        "keywords": ["博客", "日记", "生活"],
        "content": {"boxes": [
            _box(40, 20, "70%", [
                _text("我的博客", fontSize=28, color="#8e44ad"),
                _card("最近文章", "周末徒步记录"),
                _card("旅行随笔", "海边的三天两夜"),
            ], height=420),
            _box(20, 20, "25%", [
                _image("/templates/assets/avatar.jpg", "作者头像"),
                _text("热爱写作与摄影", fontSize=14, color="#7f8c8d"),
            ], height=420),
        ]},
    },
    {
        "id": 7,
        "name": "促销活动模板",
        "description": "限时折扣与活动报名页面",
        "thumbnail": "/templates/marketing.jpg",
        "category": "ecommerce",
        "keywords": ["促销", "活动", "营销"],
        "content": {"boxes": [
            _box(0, 0, "100%", [
                _text("双十一狂欢节", fontSize=32, color="#c0392b", fontWeight="bold"),
                _component("dateRange", {"start": "活动开始", "end": "活动结束"}),
                _button("立即抢购", backgroundColor="#c0392b", color="#fff"),
            ]),
        ]},
    },
    {
        "id": 8,
        "name": "课程表模板",
        "description": "一周课程安排",
        "thumbnail": "/templates/schedule.jpg",
        "category": "education",
        "keywords": ["课程", "课程表", "学习"],
        "content": {"boxes": [
            _box(40, 20, "100%", [
                _text("本周课程表", fontSize=22, color="#2c3e50"),
                _component("date", {"value": "选择日期"}),
                _table([["时间", "周一", "周二", "周三"], ["08:00", "数学", "语文", "英语"],
                        ["10:00", "物理", "化学", "生物"]]),
            ], height=360),
        ]},
    },
    {
        "id": 9,
        "name": "技术博客模板",
        "description": "面向开发者的技术文章页面",
        "thumbnail": "/templates/notes.jpg",
        "category": "blog",
        "keywords": ["博客", "文章", "技术", "blog"],
        "content": {"boxes": [
            _box(40, 20, "100%", [
                _text("深入理解异步编程", fontSize=26, color="#2d3436", fontWeight="bold"),
                _text("发布于 2024-05-01 · 阅读 8 分钟", fontSize=12, color="#636e72"),
                _text("本文介绍事件循环、协程与任务调度的基本原理。", fontSize=16),
            ], height=400),
        ]},
    },
    {
        "id": 10,
        "name": "公司简介模板",
        "description": "企业介绍与联系方式",
        "thumbnail": "/templates/company-profile.jpg",
        "category": "business",
        "keywords": ["公司", "企业", "简介"],
        "content": {"boxes": [
            _box(40, 20, "100%", [
                _image("/templates/assets/office.jpg", "办公环境"),
                _card("关于我们", "专注于数字化解决方案十余年", column=1),
            ], columns=2),
            _box(40, 20, "100%", [
                _text("联系我们：contact@example.com", fontSize=14),
                _button("预约咨询", backgroundColor="#2980b9", color="#fff"),
            ]),
        ]},
    },
]


# ==================== Seed Functions ====================

async def seed_templates(db: AsyncSession) -> int:
    """Insert the built-in catalogue when the templates table is empty; returns rows added"""
    existing = await db.scalar(select(func.count()).select_from(Template))
    if existing:
        logger.info(f"[Seed] Templates table already has {existing} rows, skipping")
        return 0

    for data in SAMPLE_TEMPLATES:
        db.add(Template(**data))
    await db.commit()

    logger.info(f"[Seed] Inserted {len(SAMPLE_TEMPLATES)} templates")
    return len(SAMPLE_TEMPLATES)


async def reset_templates(db: AsyncSession) -> int:
    """Replace the catalogue with the built-in templates"""
    await db.execute(delete(Template))
    await db.commit()
    return await seed_templates(db)


async def run(reset: bool = False) -> int:
    await init_db()
    try:
        async with AsyncSessionLocal() as db:
            try:
                if reset:
                    return await reset_templates(db)
                return await seed_templates(db)
            except Exception:
                await db.rollback()
                raise
    finally:
        await close_db()


def main() -> None:
    """Console entry point (pagecraft-seed)"""
    reset = len(sys.argv) > 1 and sys.argv[1] == "reset"
    added = asyncio.run(run(reset=reset))
    print(f"Seeded {added} templates")


if __name__ == "__main__":
    main()
